"""
Configuration loading with multi-layer merging.

Implements the precedence chain:
    defaults < user config < project config < env vars
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import GitignoreMode, UserSettings

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "strategic-claude-basic"
PROJECT_CONFIG_FILE = "strategic-claude-basic.json"


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Path to ~/.config/strategic-claude-basic/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / CONFIG_DIR_NAME / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / PROJECT_CONFIG_FILE


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`; nested dicts
    are merged rather than replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 10, 'y': 2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: top-level value is not an object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _is_truthy(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        SCB_TEMPLATE - overrides template
        SCB_GITIGNORE_MODE - overrides gitignore_mode
        SCB_NO_BACKUP - overrides no_backup
        SCB_GIT_TIMEOUT - overrides git_timeout
    """
    result = config_dict.copy()

    if template := os.environ.get("SCB_TEMPLATE"):
        result["template"] = template

    if mode := os.environ.get("SCB_GITIGNORE_MODE"):
        try:
            result["gitignore_mode"] = GitignoreMode(mode).value
        except ValueError:
            logger.warning(f"Invalid SCB_GITIGNORE_MODE value '{mode}', ignoring")

    if no_backup := os.environ.get("SCB_NO_BACKUP"):
        result["no_backup"] = _is_truthy(no_backup)

    if timeout_str := os.environ.get("SCB_GIT_TIMEOUT"):
        try:
            timeout = int(timeout_str)
            if timeout < 1:
                logger.warning(f"SCB_GIT_TIMEOUT must be >= 1, got {timeout}, ignoring")
            else:
                result["git_timeout"] = timeout
        except ValueError:
            logger.warning(f"Invalid SCB_GIT_TIMEOUT value '{timeout_str}', ignoring")

    return result


def load_user_settings(project_dir: Path | None = None) -> UserSettings:
    """
    Load installer defaults with multi-layer merging.

    Precedence (highest to lowest):
        1. Environment variables (SCB_*)
        2. Project config (strategic-claude-basic.json in the target)
        3. User config (~/.config/strategic-claude-basic/config.json)
        4. Hardcoded defaults

    Invalid values in any layer fall back to the defaults with a warning.
    """
    merged: dict[str, Any] = {}

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    try:
        return UserSettings(**merged)
    except ValidationError as e:
        logger.warning(f"Invalid installer configuration, using defaults: {e}")
        return UserSettings()
