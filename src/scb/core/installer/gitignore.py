"""
Ignore-file policy.

Copies the template's ignore files into the project according to the chosen
GitignoreMode, merging with any ignore file already there.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from scb.core.config.constants import (
    CLAUDE_DIR,
    CLAUDE_IGNORE_TEMPLATE,
    FRAMEWORK_DIR,
    FRAMEWORK_IGNORE_ALL_TEMPLATE,
    FRAMEWORK_IGNORE_NON_USER_TEMPLATE,
    GITIGNORE_FILE,
    IGNORE_TEMPLATES_DIR,
)
from scb.core.config.models import GitignoreMode
from scb.core.errors import filesystem_error

logger = logging.getLogger(__name__)

GITIGNORE_HEADER = "# Strategic Claude Basic entries"
_HEADER_PREFIX = "# Strategic Claude Basic"

# template file -> destination relative to the target directory
_MODE_TEMPLATES: dict[GitignoreMode, dict[str, str]] = {
    GitignoreMode.TRACK: {},
    GitignoreMode.ALL: {
        CLAUDE_IGNORE_TEMPLATE: f"{CLAUDE_DIR}/{GITIGNORE_FILE}",
        FRAMEWORK_IGNORE_ALL_TEMPLATE: f"{FRAMEWORK_DIR}/{GITIGNORE_FILE}",
    },
    GitignoreMode.NON_USER: {
        CLAUDE_IGNORE_TEMPLATE: f"{CLAUDE_DIR}/{GITIGNORE_FILE}",
        FRAMEWORK_IGNORE_NON_USER_TEMPLATE: f"{FRAMEWORK_DIR}/{GITIGNORE_FILE}",
    },
}


def merge_ignore_lines(existing: list[str], template: list[str]) -> list[str]:
    """
    Existing lines first, then new template lines, without duplicates.

    Blank lines and earlier header lines are dropped.
    """
    seen: set[str] = set()
    result: list[str] = []
    for line in existing:
        stripped = line.strip()
        if stripped and stripped not in seen and not stripped.startswith(_HEADER_PREFIX):
            result.append(line)
            seen.add(stripped)
    for line in template:
        stripped = line.strip()
        if stripped and stripped not in seen:
            result.append(line)
            seen.add(stripped)
    return result


def apply_ignore_template(template_path: Path, target_path: Path) -> bool:
    """
    Write or merge one ignore file.

    Returns:
        False if the template does not exist, True otherwise
    """
    if not template_path.is_file():
        return False

    try:
        template_lines = template_path.read_text().splitlines()
        existing_lines: list[str] = []
        if target_path.exists():
            existing_lines = target_path.read_text().splitlines()
            backup = target_path.with_name(target_path.name + ".backup")
            try:
                shutil.copy2(target_path, backup)
            except OSError as e:
                logger.warning(f"Failed to back up {target_path}: {e}")

        lines = merge_ignore_lines(existing_lines, template_lines)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text("\n".join([GITIGNORE_HEADER, *lines]) + "\n")
    except OSError as e:
        raise filesystem_error("write ignore file", target_path, e) from e
    return True


def apply_gitignore_policy(source_dir: Path, target_dir: Path, mode: GitignoreMode) -> list[str]:
    """
    Apply the ignore templates for `mode` from a fetched template tree.

    Args:
        source_dir: Root of the fetched template tree
        target_dir: Project directory
        mode: Ignore-file policy

    Returns:
        Warnings for templates the tree does not ship
    """
    warnings: list[str] = []
    templates_dir = source_dir / FRAMEWORK_DIR / IGNORE_TEMPLATES_DIR
    for template_name, destination in _MODE_TEMPLATES[mode].items():
        if apply_ignore_template(templates_dir / template_name, target_dir / destination):
            logger.info(f"Applied ignore template {template_name} -> {destination}")
        else:
            warnings.append(f"Gitignore template {template_name} not found, skipping")
    return warnings
