"""
Codex config copy.

The Codex integration takes the framework's TOML config as-is: the template
overwrites .codex/config.toml after the current file is backed up.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from scb.core.config.constants import (
    CODEX_CONFIG_BACKUP_PREFIX,
    CODEX_CONFIG_FILE,
    CODEX_CONFIG_TEMPLATE_FILE,
    CODEX_DIR,
    FRAMEWORK_DIR,
)
from scb.core.errors import filesystem_error
from scb.core.filesystem import backup_file, create_directory

logger = logging.getLogger(__name__)


def install_codex_config(target_dir: Path) -> Path | None:
    """
    Copy the framework's Codex config template into .codex/config.toml.

    Returns:
        Path of the written config, or None if the framework ships no template
    """
    template_path = target_dir / FRAMEWORK_DIR / CODEX_CONFIG_TEMPLATE_FILE
    if not template_path.is_file():
        logger.debug(f"No Codex config template at {template_path}, skipping")
        return None

    config_path = target_dir / CODEX_DIR / CODEX_CONFIG_FILE
    create_directory(config_path.parent)
    if config_path.exists():
        backup = backup_file(config_path, CODEX_CONFIG_BACKUP_PREFIX, ".toml")
        logger.info(f"Backed up Codex config to {backup}")

    try:
        shutil.copyfile(template_path, config_path)
    except OSError as e:
        raise filesystem_error("write Codex config", config_path, e) from e
    logger.info(f"Installed Codex config at {config_path}")
    return config_path
