"""
Pytest configuration and shared fixtures.

Provides fixtures for target projects, a fake template tree, a source provider
that serves that tree without git, and isolated configuration environments.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from scb.core.config.constants import (
    CLAUDE_IGNORE_TEMPLATE,
    CODEX_CONFIG_TEMPLATE_FILE,
    FRAMEWORK_DIR,
    FRAMEWORK_IGNORE_ALL_TEMPLATE,
    FRAMEWORK_IGNORE_NON_USER_TEMPLATE,
    IGNORE_TEMPLATES_DIR,
    MCP_TEMPLATES_DIR,
    SETTINGS_TEMPLATE_FILE,
    TEMP_DIR_PREFIX,
)
from scb.core.templates.models import Template

# ==============================================================================
# Template Tree Helpers
# ==============================================================================

SETTINGS_TEMPLATE = {
    "hooks": {
        "PreToolUse": [
            {
                "matcher": "Bash",
                "hooks": [
                    {
                        "type": "command",
                        "command": "python3 .claude/hooks/strategic/block-skip-hooks.py",
                    }
                ],
            }
        ],
        "Stop": [
            {
                "hooks": [
                    {
                        "type": "command",
                        "command": (
                            "/usr/bin/python3 $CLAUDE_PROJECT_DIR/.claude/hooks/strategic/"
                            "stop-session-notify.py"
                        ),
                    }
                ]
            }
        ],
    },
    "permissions": {"allow": ["Bash(rm -rf /tmp/*)"]},
}

CODEX_TEMPLATE = 'model = "gpt-5"\n\n[features]\nhooks = true\n'


def build_template_tree(
    root: Path,
    *,
    pre_install: str | None = None,
    post_install: str | None = None,
    with_settings: bool = True,
    with_ignore_templates: bool = True,
) -> Path:
    """
    Write a minimal framework template tree under `root`.

    Layout mirrors a fetched template repository: the framework directory
    with core/{agents,commands,hooks}, guides and templates, plus optional
    install scripts at the tree root.
    """
    framework = root / FRAMEWORK_DIR
    for sub in ("agents", "commands", "hooks"):
        (framework / "core" / sub).mkdir(parents=True)
    (framework / "core" / "agents" / "planner.md").write_text("# Planner agent\n")
    (framework / "core" / "commands" / "plan.md").write_text("# /plan\n")
    (framework / "core" / "hooks" / "block-skip-hooks.py").write_text("print('ok')\n")
    (framework / "guides").mkdir()
    (framework / "guides" / "getting-started.md").write_text("# Getting started\n")
    (framework / "templates" / "hooks").mkdir(parents=True)
    (framework / "plan").mkdir()
    (framework / "plan" / "README.md").write_text("Plans live here\n")

    if with_settings:
        (framework / SETTINGS_TEMPLATE_FILE).write_text(json.dumps(SETTINGS_TEMPLATE, indent=2))
    (framework / CODEX_CONFIG_TEMPLATE_FILE).write_text(CODEX_TEMPLATE)

    if with_ignore_templates:
        ignore_dir = framework / IGNORE_TEMPLATES_DIR
        ignore_dir.mkdir(parents=True)
        (ignore_dir / CLAUDE_IGNORE_TEMPLATE).write_text(
            "agents/strategic\ncommands/strategic\nhooks/strategic\n"
        )
        (ignore_dir / FRAMEWORK_IGNORE_ALL_TEMPLATE).write_text("*\n")
        (ignore_dir / FRAMEWORK_IGNORE_NON_USER_TEMPLATE).write_text(
            "core/\nguides/\ntemplates/\n"
        )

    if pre_install is not None:
        (root / "pre-install.sh").write_text(pre_install)
    if post_install is not None:
        (root / "post-install.sh").write_text(post_install)
    return root


class FakeSourceProvider:
    """
    Source provider that serves a local template tree instead of cloning.

    Each fetch copies the tree into a fresh temporary directory named like
    the git provider's, and records what was fetched and cleaned up.
    """

    def __init__(self, tree: Path) -> None:
        self.tree = tree
        self.fetched: list[Path] = []
        self.cleaned: list[Path] = []
        self.templates: list[Template] = []

    def validate_git_installed(self) -> None:
        return None

    def fetch(self, template: Template) -> Path:
        self.templates.append(template)
        temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        shutil.copytree(self.tree, temp_dir, symlinks=True, dirs_exist_ok=True)
        self.fetched.append(temp_dir)
        return temp_dir

    def cleanup(self, path: Path) -> None:
        self.cleaned.append(path)
        shutil.rmtree(path, ignore_errors=True)


def snapshot_tree(root: Path, exclude_prefixes: tuple[str, ...] = ()) -> dict[str, str]:
    """Map of relative path -> file content or symlink target, for comparisons."""
    result: dict[str, str] = {}
    for path in sorted(root.rglob("*")):
        if any(part.startswith(exclude_prefixes) for part in path.relative_to(root).parts):
            continue
        rel = str(path.relative_to(root))
        if path.is_symlink():
            result[rel] = f"-> {os.readlink(path)}"
        elif path.is_file():
            result[rel] = path.read_text()
        else:
            result[rel] = "<dir>"
    return result


MCP_CONTEXT7 = {"command": "npx", "args": ["-y", "@upstash/context7-mcp"]}
MCP_PLAYWRIGHT = {"command": "npx", "args": ["@playwright/mcp@latest"], "env": {"HEADLESS": "1"}}


def write_mcp_templates(project: Path, *, with_base: bool = True) -> Path:
    """Add MCP server templates to an installed project's framework directory."""
    mcps = project / FRAMEWORK_DIR / MCP_TEMPLATES_DIR
    mcps.mkdir(parents=True, exist_ok=True)
    (mcps / "playwright.mcp.json").write_text(json.dumps({"playwright": MCP_PLAYWRIGHT}))
    (mcps / "context7.mcp.json").write_text(json.dumps({"context7": MCP_CONTEXT7}))
    (mcps / ".gitkeep").write_text("")
    if with_base:
        base = {"mcpServers": {"memory": {"command": "npx", "args": ["memory-mcp"]}}}
        (mcps / "template.mcp.json").write_text(json.dumps(base))
    return mcps


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def project_dir(tmp_path):
    """Provide an empty target project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def template_tree(tmp_path):
    """Provide a fake template tree as fetched from the template repository."""
    return build_template_tree(tmp_path / "template-src")


@pytest.fixture
def source_provider(template_tree):
    """Provide a FakeSourceProvider serving the default template tree."""
    return FakeSourceProvider(template_tree)


@pytest.fixture
def installed_project(project_dir, source_provider):
    """Provide a project with a fresh installation of the main template."""
    from scb.core.config.models import InstallConfig
    from scb.core.installer.service import Installer

    Installer(source_provider=source_provider).install(InstallConfig(target_dir=project_dir))
    return project_dir


@pytest.fixture
def mcp_project(installed_project):
    """Provide an installed project whose framework ships MCP server templates."""
    write_mcp_templates(installed_project)
    return installed_project


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """
    Provide a clean environment without SCB_* env vars.

    Removes all SCB_* environment variables to ensure tests
    don't inherit configuration from the system.
    """
    for key in list(os.environ.keys()):
        if key.startswith("SCB_"):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("XDG_CONFIG_HOME", "/tmp/test-config")

    return monkeypatch


@pytest.fixture
def isolated_config(clean_env, tmp_path, monkeypatch):
    """
    Provide completely isolated config environment.

    Sets XDG_CONFIG_HOME to a temporary location to prevent tests
    from loading system or user configs.
    """
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home
