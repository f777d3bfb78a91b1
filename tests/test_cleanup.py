"""
Tests for the cleanup service.

Tests removal of an installation while leaving user-owned files, symlinks and
settings in place.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from scb.core.cleanup.service import (
    NOTHING_INSTALLED_WARNING,
    CleanupError,
    CleanupResult,
    CleanupService,
)
from scb.core.config.constants import FRAMEWORK_DIR, HOOK_COMMAND_PREFIX
from scb.core.errors import PermissionDeniedError
from scb.core.symlinks.manager import SymlinkManager


class TestCleanupResult:
    """Tests for CleanupResult dataclass."""

    def test_empty_result(self) -> None:
        result = CleanupResult()
        assert result.success is True
        assert result.removed_anything is False
        assert result.summary() == "No cleanup actions needed"

    def test_summary(self) -> None:
        result = CleanupResult(
            removed_directory=True,
            removed_symlinks=[".claude/agents/strategic", ".codex/hooks/strategic"],
            cleaned_settings=True,
            preserved_files=[".claude/agents/mine.md"],
        )
        summary = result.summary()
        assert f"Removed {FRAMEWORK_DIR}" in summary
        assert "Removed 2 symlink(s)" in summary
        assert "Cleaned settings.json" in summary
        assert "Preserved 1 item(s)" in summary

    def test_errors_mean_failure(self) -> None:
        assert CleanupResult(errors=["boom"]).success is False


class TestRemoveInstallation:
    """Tests for CleanupService.remove_installation."""

    def test_nothing_installed(self, project_dir: Path) -> None:
        result = CleanupService().remove_installation(project_dir)

        assert result.warnings == [NOTHING_INSTALLED_WARNING]
        assert result.removed_anything is False
        assert list(project_dir.iterdir()) == []

    def test_user_only_claude_dir_untouched(self, project_dir: Path) -> None:
        """A .claude directory with no framework traces is left alone."""
        claude = project_dir / ".claude"
        (claude / "agents").mkdir(parents=True)
        (claude / "settings.json").write_text(json.dumps({"model": "opus"}))

        result = CleanupService().remove_installation(project_dir)

        assert result.warnings == [NOTHING_INSTALLED_WARNING]
        assert (claude / "agents").is_dir()
        assert json.loads((claude / "settings.json").read_text()) == {"model": "opus"}

    def test_full_cleanup(self, installed_project: Path) -> None:
        result = CleanupService().remove_installation(installed_project)

        assert result.success
        assert result.removed_directory is True
        assert not (installed_project / FRAMEWORK_DIR).exists()
        assert len(result.removed_symlinks) == 5
        assert not (installed_project / ".claude" / "settings.json").exists()
        assert "settings.json removed (was empty after cleanup)" in result.preserved_files
        assert ".claude/agents" in result.cleaned_directories
        assert ".codex/prompts" in result.cleaned_directories
        # the Codex config is user-facing and stays
        assert ".codex/config.toml" in result.preserved_files
        assert (installed_project / ".codex" / "config.toml").exists()

    def test_user_files_preserved(self, installed_project: Path) -> None:
        mine = installed_project / ".claude" / "agents" / "mine.md"
        mine.write_text("my agent")

        result = CleanupService().remove_installation(installed_project)

        assert mine.read_text() == "my agent"
        assert ".claude/agents/mine.md" in result.preserved_files
        assert ".claude/agents" not in result.cleaned_directories

    def test_foreign_symlink_preserved(self, installed_project: Path) -> None:
        link = installed_project / ".claude" / "agents" / "strategic"
        link.unlink()
        link.symlink_to("../../my-agents")

        result = CleanupService().remove_installation(installed_project)

        assert link.is_symlink()
        assert ".claude/agents/strategic" in result.preserved_files
        assert any("Preserving non-Strategic Claude symlink" in w for w in result.warnings)
        assert len(result.removed_symlinks) == 4

    def test_user_hooks_survive(self, project_dir: Path, source_provider) -> None:
        from scb.core.config.models import InstallConfig
        from scb.core.installer.service import Installer

        claude = project_dir / ".claude"
        claude.mkdir()
        user_hook = {"type": "command", "command": "npm run lint"}
        (claude / "settings.json").write_text(
            json.dumps(
                {
                    "hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [user_hook]}]},
                    "permissions": {"allow": ["Read(*)"]},
                }
            )
        )
        Installer(source_provider=source_provider).install(InstallConfig(target_dir=project_dir))

        result = CleanupService().remove_installation(project_dir)

        settings = json.loads((claude / "settings.json").read_text())
        assert settings == {
            "hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [user_hook]}]},
            "permissions": {"allow": ["Read(*)"]},
        }
        assert HOOK_COMMAND_PREFIX not in (claude / "settings.json").read_text()
        assert "settings.json (cleaned of strategic hooks)" in result.preserved_files

    def test_framework_removal_failure(self, installed_project: Path) -> None:
        error = PermissionDeniedError("failed to remove directory")
        with patch(
            "scb.core.cleanup.service.remove_named_directory", side_effect=error
        ), pytest.raises(CleanupError) as exc_info:
            CleanupService().remove_installation(installed_project)

        assert exc_info.value.result.errors
        assert len(exc_info.value.result.removed_symlinks) == 5

    def test_second_cleanup_is_noop(self, installed_project: Path) -> None:
        service = CleanupService()
        service.remove_installation(installed_project)

        result = service.remove_installation(installed_project)

        assert result.warnings == [NOTHING_INSTALLED_WARNING]


class TestHandlePartialInstallation:
    """Tests for cleanup after an interrupted install."""

    def test_removes_dangling_symlinks(self, project_dir: Path) -> None:
        (project_dir / FRAMEWORK_DIR / "core" / "agents").mkdir(parents=True)
        SymlinkManager().create_all(project_dir)
        # commands and hooks targets never got created
        result = CleanupService().handle_partial_installation(project_dir)

        assert sorted(result.removed_symlinks) == [
            ".claude/commands/strategic",
            ".claude/hooks/strategic",
            ".codex/hooks/strategic",
            ".codex/prompts/strategic",
        ]
        assert result.removed_directory is True
        assert not (project_dir / FRAMEWORK_DIR).exists()

    def test_keeps_regular_directory_at_link_path(self, project_dir: Path) -> None:
        blocker = project_dir / ".claude" / "agents" / "strategic"
        blocker.mkdir(parents=True)
        (blocker / "notes.md").write_text("notes")

        result = CleanupService().handle_partial_installation(project_dir)

        assert (blocker / "notes.md").exists()
        assert ".claude/agents/strategic" in result.preserved_files
