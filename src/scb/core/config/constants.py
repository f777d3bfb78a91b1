"""
Fixed on-disk layout of a Strategic Claude Basic installation.

Everything the installer, status detector and cleanup engine agree on lives
here: directory names, the symlink tables of each integration directory,
file names and the prefixes used for backups and scratch directories.
"""

from __future__ import annotations

from dataclasses import dataclass

# Directory names
FRAMEWORK_DIR = ".strategic-claude-basic"
CLAUDE_DIR = ".claude"
CODEX_DIR = ".codex"

# Top-level framework children that updates may replace
FRAMEWORK_SUBDIRS: tuple[str, ...] = ("core", "guides", "templates")
CORE_SUBDIRS: tuple[str, ...] = ("agents", "commands", "hooks")

# Top-level framework children that always belong to the user
USER_PRESERVED_DIRS: tuple[str, ...] = (
    "archives",
    "decisions",
    "issues",
    "plan",
    "product",
    "research",
    "summary",
    "tools",
    "validation",
)

# Backups and scratch space
BACKUP_DIR_PREFIX = "strategic-claude-basic-backup-"
TEMP_DIR_PREFIX = "strategic-claude-base-"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

# Files inside the framework directory
TEMPLATE_INFO_FILE = ".template-info"
SETTINGS_TEMPLATE_FILE = "templates/hooks/dot_claude.settings.template.json"
CODEX_CONFIG_TEMPLATE_FILE = "templates/hooks/dot_codex.config.template.toml"
IGNORE_TEMPLATES_DIR = "templates/ignore"
MCP_TEMPLATES_DIR = "templates/mcps"
MCP_BASE_TEMPLATE = "template.mcp.json"
MCP_TEMPLATE_SUFFIX = ".mcp.json"

# Files inside integration directories
SETTINGS_FILE = "settings.json"
SETTINGS_BACKUP_PREFIX = "settings-backup-"
CODEX_CONFIG_FILE = "config.toml"
CODEX_CONFIG_BACKUP_PREFIX = "config-backup-"

# Project-root MCP server configuration
MCP_CONFIG_FILE = ".mcp.json"
MCP_BACKUP_PREFIX = ".mcp-backup-"

# Scripts shipped at the root of a fetched template tree
PRE_INSTALL_SCRIPT = "pre-install.sh"
POST_INSTALL_SCRIPT = "post-install.sh"

# Ignore-file templates
GITIGNORE_FILE = ".gitignore"
CLAUDE_IGNORE_TEMPLATE = "dot_claude-strategic-ignore.template"
FRAMEWORK_IGNORE_ALL_TEMPLATE = "dot_strategic-claude-basic-ignore-all.template"
FRAMEWORK_IGNORE_NON_USER_TEMPLATE = "dot_strategic-claude-basic-ignore-non-user-dirs.template"

# Hook scripts shipped by the framework, matched by basename
FRAMEWORK_HOOK_SCRIPTS: tuple[str, ...] = (
    "block-skip-hooks.py",
    "block-config-writes.py",
    "stop-session-notify.py",
    "precompact-notify.py",
    "notification-hook.py",
)
HOOK_COMMAND_PREFIX = "/usr/bin/python3 $CLAUDE_PROJECT_DIR/.claude/hooks/strategic/"

# Hook types understood by the settings document, in output order
HOOK_TYPES: tuple[str, ...] = (
    "PreToolUse",
    "PostToolUse",
    "Stop",
    "PreCompact",
    "Notification",
)


@dataclass(frozen=True)
class SymlinkSpec:
    """A named relative symlink inside an integration directory."""

    name: str
    target: str


@dataclass(frozen=True)
class IntegrationLayout:
    """An integration directory, its required subdirectories and symlinks."""

    dirname: str
    subdirs: tuple[str, ...]
    symlinks: tuple[SymlinkSpec, ...]

    def spec_targets(self) -> set[str]:
        return {spec.target for spec in self.symlinks}


CLAUDE_LAYOUT = IntegrationLayout(
    dirname=CLAUDE_DIR,
    subdirs=("agents", "commands", "hooks"),
    symlinks=(
        SymlinkSpec("agents/strategic", f"../../{FRAMEWORK_DIR}/core/agents"),
        SymlinkSpec("commands/strategic", f"../../{FRAMEWORK_DIR}/core/commands"),
        SymlinkSpec("hooks/strategic", f"../../{FRAMEWORK_DIR}/core/hooks"),
    ),
)

CODEX_LAYOUT = IntegrationLayout(
    dirname=CODEX_DIR,
    subdirs=("prompts", "hooks"),
    symlinks=(
        SymlinkSpec("prompts/strategic", f"../../{FRAMEWORK_DIR}/core/commands"),
        SymlinkSpec("hooks/strategic", f"../../{FRAMEWORK_DIR}/core/hooks"),
    ),
)

INTEGRATION_LAYOUTS: tuple[IntegrationLayout, ...] = (CLAUDE_LAYOUT, CODEX_LAYOUT)


def all_spec_targets() -> set[str]:
    """Every symlink target string the framework ever creates."""
    targets: set[str] = set()
    for layout in INTEGRATION_LAYOUTS:
        targets |= layout.spec_targets()
    return targets
