"""
Configuration for the installer.

Exports:
    InstallConfig: Options for an install/update run
    CleanConfig: Options for removing an installation
    GitignoreMode: Ignore-file policy
    UserSettings: Defaults loaded from config files and env vars
    load_user_settings: Layered defaults loader
"""

from scb.core.config.loader import load_user_settings
from scb.core.config.models import (
    DEFAULT_TEMPLATE_ID,
    CleanConfig,
    GitignoreMode,
    InstallConfig,
    UserSettings,
)

__all__ = [
    "DEFAULT_TEMPLATE_ID",
    "CleanConfig",
    "GitignoreMode",
    "InstallConfig",
    "UserSettings",
    "load_user_settings",
]
