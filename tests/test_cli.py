"""
Tests for the scb command-line interface.

Commands run through typer's CliRunner; the git source provider used by
`scb init` is replaced with FakeSourceProvider.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from scb import __version__
from scb.cli import app
from scb.cli.errors import ExitCode
from scb.core.config.constants import FRAMEWORK_DIR
from scb.core.status.detector import StatusDetector

runner = CliRunner()


@pytest.fixture
def fake_git(source_provider):
    """Route `scb init` to the fake template tree."""
    with patch("scb.cli.init_cmd.GitSourceProvider", return_value=source_provider):
        yield source_provider


# ==============================================================================
# Top-level
# ==============================================================================


class TestApp:
    """Tests for the top-level app."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("init", "status", "clean", "repair", "templates", "install-mcp"):
            assert command in result.output

    def test_help_mentions_shell_completion(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert "--install-completion" in result.output

    def test_templates(self) -> None:
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "main" in result.output
        assert "ccr" in result.output

    def test_templates_filter_by_tag(self) -> None:
        result = runner.invoke(app, ["templates", "--tag", "workflow"])
        assert result.exit_code == 0
        assert "ccr" in result.output
        assert "(default)" not in result.output


# ==============================================================================
# init
# ==============================================================================


class TestInit:
    """Tests for `scb init`."""

    def test_fresh_install(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(app, ["init", str(project_dir), "--template", "main", "--yes"])

        assert result.exit_code == 0, result.output
        assert "installation completed successfully" in result.output
        assert StatusDetector().check_installation(project_dir).is_installed
        assert fake_git.templates[0].id == "main"

    def test_force_and_force_core(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(
            app, ["init", str(project_dir), "-t", "main", "--force", "--force-core", "-y"]
        )

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "cannot specify both" in result.output
        assert list(project_dir.iterdir()) == []

    def test_unknown_template(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(app, ["init", str(project_dir), "--template", "nope", "-y"])

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert "Invalid template" in result.output

    def test_dry_run_changes_nothing(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(app, ["init", str(project_dir), "-t", "main", "--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN" in result.output
        assert "New Installation" in result.output
        assert list(project_dir.iterdir()) == []
        assert fake_git.fetched == []

    def test_dry_run_without_git(self, project_dir: Path, isolated_config) -> None:
        with patch("scb.core.sources.git.shutil.which", return_value=None):
            result = runner.invoke(app, ["init", str(project_dir), "-t", "main", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "DRY RUN" in result.output

    def test_install_without_git(self, project_dir: Path, isolated_config) -> None:
        with patch("scb.core.sources.git.shutil.which", return_value=None):
            result = runner.invoke(app, ["init", str(project_dir), "-t", "main", "-y"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "git is not installed" in result.output
        assert list(project_dir.iterdir()) == []

    def test_already_installed(self, installed_project: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(app, ["init", str(installed_project), "-t", "main", "-y"])

        assert result.exit_code == ExitCode.ALREADY_INSTALLED
        assert "already installed" in result.output

    def test_force_core_update(self, installed_project: Path, fake_git, isolated_config) -> None:
        (installed_project / FRAMEWORK_DIR / "plan" / "mine.md").write_text("mine")

        result = runner.invoke(
            app, ["init", str(installed_project), "-t", "main", "--force-core", "-y"]
        )

        assert result.exit_code == 0, result.output
        assert (installed_project / FRAMEWORK_DIR / "plan" / "mine.md").read_text() == "mine"

    def test_declined_confirmation(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(app, ["init", str(project_dir), "-t", "main"], input="n\n")

        assert result.exit_code == ExitCode.USER_CANCELLED
        assert list(project_dir.iterdir()) == []

    def test_interactive_template_choice(
        self, project_dir: Path, fake_git, isolated_config
    ) -> None:
        # templates are listed by id: 1 = ccr, 2 = main
        result = runner.invoke(app, ["init", str(project_dir)], input="2\ny\n")

        assert result.exit_code == 0, result.output
        assert fake_git.templates[0].id == "main"

    def test_gitignore_option(self, project_dir: Path, fake_git, isolated_config) -> None:
        result = runner.invoke(
            app, ["init", str(project_dir), "-t", "main", "-y", "--gitignore", "all"]
        )

        assert result.exit_code == 0, result.output
        assert (project_dir / FRAMEWORK_DIR / ".gitignore").exists()


# ==============================================================================
# status / repair / clean
# ==============================================================================


class TestStatus:
    """Tests for `scb status`."""

    def test_not_installed(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["status", str(project_dir)])

        assert result.exit_code == ExitCode.NOT_INSTALLED
        assert "not installed" in result.output

    def test_installed(self, installed_project: Path) -> None:
        result = runner.invoke(app, ["status", str(installed_project), "--verbose"])

        assert result.exit_code == 0
        assert "is installed" in result.output
        assert ".claude/agents/strategic" in result.output

    def test_json(self, installed_project: Path) -> None:
        result = runner.invoke(app, ["status", str(installed_project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["is_installed"] is True
        assert data["template_info"]["template"]["id"] == "main"

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path / "missing")])
        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestRepair:
    """Tests for `scb repair`."""

    def test_repairs_missing_symlink(self, installed_project: Path) -> None:
        (installed_project / ".codex" / "hooks" / "strategic").unlink()

        result = runner.invoke(app, ["repair", str(installed_project)])

        assert result.exit_code == 0
        assert "Repaired .codex/hooks/strategic" in result.output
        assert StatusDetector().check_installation(installed_project).issues == []

    def test_nothing_to_repair(self, installed_project: Path) -> None:
        result = runner.invoke(app, ["repair", str(installed_project)])
        assert result.exit_code == 0
        assert "nothing to repair" in result.output

    def test_not_installed(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["repair", str(project_dir)])
        assert result.exit_code == ExitCode.NOT_INSTALLED


class TestClean:
    """Tests for `scb clean`."""

    def test_nothing_installed(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["clean", str(project_dir), "--force"])

        assert result.exit_code == 0
        assert "No Strategic Claude Basic installation found" in result.output

    def test_clean_installed(self, installed_project: Path) -> None:
        mine = installed_project / ".claude" / "agents" / "mine.md"
        mine.write_text("mine")

        result = runner.invoke(app, ["clean", str(installed_project), "--force"])

        assert result.exit_code == 0, result.output
        assert not (installed_project / FRAMEWORK_DIR).exists()
        assert mine.exists()
        assert "Preserved" in result.output

    def test_declined(self, installed_project: Path) -> None:
        result = runner.invoke(app, ["clean", str(installed_project)], input="n\n")

        assert result.exit_code == ExitCode.USER_CANCELLED
        assert (installed_project / FRAMEWORK_DIR).exists()


class TestInstallMcp:
    """Tests for `scb install-mcp`."""

    def test_not_installed(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["install-mcp", str(project_dir), "--all", "-y"])
        assert result.exit_code == ExitCode.NOT_INSTALLED

    def test_list(self, mcp_project: Path) -> None:
        result = runner.invoke(app, ["install-mcp", str(mcp_project), "--list"])

        assert result.exit_code == 0
        assert "context7" in result.output
        assert "playwright" in result.output
        assert not (mcp_project / ".mcp.json").exists()

    def test_install_named_server(self, mcp_project: Path) -> None:
        result = runner.invoke(
            app, ["install-mcp", str(mcp_project), "--server", "context7", "--yes"]
        )

        assert result.exit_code == 0, result.output
        servers = json.loads((mcp_project / ".mcp.json").read_text())["mcpServers"]
        assert set(servers) == {"memory", "context7"}

    def test_interactive_selection(self, mcp_project: Path) -> None:
        result = runner.invoke(app, ["install-mcp", str(mcp_project)], input="2\ny\n")

        assert result.exit_code == 0, result.output
        servers = json.loads((mcp_project / ".mcp.json").read_text())["mcpServers"]
        assert "playwright" in servers
        assert "context7" not in servers

    def test_unknown_server(self, mcp_project: Path) -> None:
        result = runner.invoke(app, ["install-mcp", str(mcp_project), "-s", "nope", "-y"])

        assert result.exit_code == ExitCode.VALIDATION_ERROR
        assert not (mcp_project / ".mcp.json").exists()

    def test_declined(self, mcp_project: Path) -> None:
        result = runner.invoke(app, ["install-mcp", str(mcp_project), "--all"], input="n\n")

        assert result.exit_code == ExitCode.USER_CANCELLED
        assert not (mcp_project / ".mcp.json").exists()

    def test_no_templates_available(self, installed_project: Path) -> None:
        (installed_project / FRAMEWORK_DIR / "templates" / "mcps").mkdir()

        result = runner.invoke(app, ["install-mcp", str(installed_project), "--all", "-y"])

        assert result.exit_code == 0
        assert "No MCP servers available" in result.output
