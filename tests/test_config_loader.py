"""
Unit tests for configuration models and the configuration loader.

Tests install option validation, multi-layer merging of user defaults,
environment variable overrides, and XDG directory handling.
"""

import json
from pathlib import Path

import pytest

from scb.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_json_file,
    load_user_settings,
)
from scb.core.config.models import CleanConfig, GitignoreMode, InstallConfig
from scb.core.errors import ConfigValidationError, ErrorCode

# ==============================================================================
# Models
# ==============================================================================


class TestInstallConfig:
    """Tests for InstallConfig.validate."""

    def test_defaults_are_valid(self, tmp_path: Path) -> None:
        config = InstallConfig(target_dir=tmp_path)
        config.validate()
        assert config.template_id == "main"
        assert config.gitignore_mode == GitignoreMode.TRACK

    def test_force_and_force_core_conflict(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            InstallConfig(target_dir=tmp_path, force=True, force_core=True).validate()
        assert exc_info.value.code == ErrorCode.VALIDATION
        assert "cannot specify both --force and --force-core" in str(exc_info.value)

    def test_empty_template(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            InstallConfig(target_dir=tmp_path, template_id="").validate()

    def test_timeout_must_be_positive(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigValidationError):
            InstallConfig(target_dir=tmp_path, git_timeout=0).validate()

    def test_clean_config(self, tmp_path: Path) -> None:
        CleanConfig(target_dir=tmp_path, force=True).validate()


# ==============================================================================
# Helper Functions
# ==============================================================================


class TestHelpers:
    """Tests for loader helper functions."""

    def test_deep_merge(self) -> None:
        assert deep_merge({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}}) == {
            "a": 1,
            "b": {"x": 1, "y": 2},
        }

    def test_xdg_config_home(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_xdg_config_home() == tmp_path
        assert get_user_config_path() == tmp_path / "strategic-claude-basic" / "config.json"

    def test_xdg_default(self, monkeypatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_project_config_path(self, tmp_path: Path) -> None:
        assert get_project_config_path(tmp_path) == tmp_path / "strategic-claude-basic.json"

    def test_load_json_file(self, tmp_path: Path) -> None:
        good = tmp_path / "good.json"
        good.write_text('{"template": "ccr"}')
        bad = tmp_path / "bad.json"
        bad.write_text("{nope")
        array = tmp_path / "array.json"
        array.write_text("[]")

        assert load_json_file(good) == {"template": "ccr"}
        assert load_json_file(bad) is None
        assert load_json_file(array) is None
        assert load_json_file(tmp_path / "missing.json") is None


class TestEnvOverrides:
    """Tests for SCB_* environment variable overrides."""

    def test_all_overrides(self, clean_env) -> None:
        clean_env.setenv("SCB_TEMPLATE", "ccr")
        clean_env.setenv("SCB_GITIGNORE_MODE", "non-user")
        clean_env.setenv("SCB_NO_BACKUP", "yes")
        clean_env.setenv("SCB_GIT_TIMEOUT", "60")

        result = apply_env_overrides({})

        assert result == {
            "template": "ccr",
            "gitignore_mode": "non-user",
            "no_backup": True,
            "git_timeout": 60,
        }

    def test_invalid_values_ignored(self, clean_env) -> None:
        clean_env.setenv("SCB_GITIGNORE_MODE", "everything")
        clean_env.setenv("SCB_GIT_TIMEOUT", "soon")

        assert apply_env_overrides({"git_timeout": 10}) == {"git_timeout": 10}

    def test_falsy_no_backup(self, clean_env) -> None:
        clean_env.setenv("SCB_NO_BACKUP", "false")
        assert apply_env_overrides({})["no_backup"] is False


# ==============================================================================
# Layered Loading
# ==============================================================================


class TestLoadUserSettings:
    """Tests for load_user_settings precedence."""

    def test_defaults(self, isolated_config, tmp_path: Path) -> None:
        settings = load_user_settings(tmp_path)
        assert settings.template == "main"
        assert settings.no_backup is False
        assert settings.git_timeout == 300

    def test_project_overrides_user(self, isolated_config, tmp_path: Path) -> None:
        user_dir = isolated_config / "strategic-claude-basic"
        user_dir.mkdir()
        (user_dir / "config.json").write_text(json.dumps({"template": "ccr", "git_timeout": 30}))
        project = tmp_path / "project"
        project.mkdir()
        (project / "strategic-claude-basic.json").write_text(json.dumps({"template": "main"}))

        settings = load_user_settings(project)

        assert settings.template == "main"
        assert settings.git_timeout == 30

    def test_env_overrides_files(self, isolated_config, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / "strategic-claude-basic.json").write_text(json.dumps({"no_backup": False}))
        monkeypatch.setenv("SCB_NO_BACKUP", "1")

        assert load_user_settings(tmp_path).no_backup is True

    def test_invalid_values_fall_back_to_defaults(self, isolated_config, tmp_path: Path) -> None:
        (tmp_path / "strategic-claude-basic.json").write_text(json.dumps({"git_timeout": -5}))

        settings = load_user_settings(tmp_path)

        assert settings.git_timeout == 300
