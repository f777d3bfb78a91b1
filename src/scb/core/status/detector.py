"""
Status detector.

Scans a target directory and reports which parts of an installation are
present, which symlinks are valid, and any inconsistencies found along the
way. Missing pieces are recorded as issues; only an unreadable or missing
target directory is an error.

Usage:
    >>> state = StatusDetector().check_installation(Path("."))
    >>> state.is_installed, state.issues
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from pydantic import ValidationError

from scb.core.config.constants import (
    CORE_SUBDIRS,
    FRAMEWORK_DIR,
    FRAMEWORK_SUBDIRS,
    INTEGRATION_LAYOUTS,
    TEMPLATE_INFO_FILE,
    IntegrationLayout,
)
from scb.core.errors import NotFoundError, PermissionDeniedError, filesystem_error
from scb.core.filesystem import is_writable
from scb.core.status.models import InstallationState
from scb.core.symlinks.manager import inspect_symlink
from scb.core.templates.models import TemplateInfo

logger = logging.getLogger(__name__)


def load_template_info(framework_dir: Path) -> TemplateInfo | None:
    """
    Read the provenance record, if there is one.

    Raises:
        OSError: If the file exists but cannot be read
        ValidationError: If the file is not a valid record
    """
    info_path = framework_dir / TEMPLATE_INFO_FILE
    if not info_path.exists():
        return None
    return TemplateInfo.model_validate_json(info_path.read_text())


class StatusDetector:
    """Builds InstallationState snapshots for target directories."""

    def __init__(self, layouts: tuple[IntegrationLayout, ...] = INTEGRATION_LAYOUTS) -> None:
        self.layouts = layouts

    def check_installation(self, target_dir: Path | str) -> InstallationState:
        """
        Inspect `target_dir`.

        Raises:
            NotFoundError: If the target does not exist or is not a directory
            PermissionDeniedError: If the target cannot be read
        """
        target = self._resolve_target(Path(target_dir))
        state = InstallationState(target_dir=str(target))

        framework_dir = target / FRAMEWORK_DIR
        state.framework_dir_exists = self._check_dir(framework_dir, state)
        if state.framework_dir_exists:
            self._check_framework_contents(framework_dir, state)

        for layout in self.layouts:
            integration_dir = target / layout.dirname
            present = self._check_dir(integration_dir, state)
            state.integration_dirs[layout.dirname] = present
            if not present:
                continue
            for sub in layout.subdirs:
                if not (integration_dir / sub).is_dir():
                    state.issues.append(f"Missing {layout.dirname} subdirectory: {sub}")
            if not is_writable(integration_dir):
                state.issues.append(f"{layout.dirname} directory is not writable")
            for spec in layout.symlinks:
                state.symlinks.append(inspect_symlink(target, layout, spec))

        if state.framework_dir_exists:
            try:
                state.template_info = load_template_info(framework_dir)
            except (OSError, ValidationError) as e:
                state.issues.append(f"Failed to load template info: {e}")

        self._cross_check(state)
        logger.debug(
            f"Status of {target}: installed={state.is_installed}, issues={len(state.issues)}"
        )
        return state

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _resolve_target(target: Path) -> Path:
        target = target.expanduser().absolute()
        try:
            info = target.stat()
        except FileNotFoundError as e:
            raise NotFoundError(
                f"target directory does not exist: {target}",
                cause=e,
                context={"operation": "check installation", "path": str(target)},
            ) from e
        except OSError as e:
            raise filesystem_error("inspect", target, e) from e

        if not stat.S_ISDIR(info.st_mode):
            raise NotFoundError(
                f"target path is not a directory: {target}",
                context={"operation": "check installation", "path": str(target)},
            )
        if not os.access(target, os.R_OK | os.X_OK):
            raise PermissionDeniedError(
                f"cannot read target directory: {target}",
                context={"operation": "check installation", "path": str(target)},
            )
        return target.resolve()

    @staticmethod
    def _check_dir(path: Path, state: InstallationState) -> bool:
        if path.is_dir():
            return True
        if path.exists() or path.is_symlink():
            state.issues.append(f"{path.name} exists but is not a directory")
        return False

    @staticmethod
    def _check_framework_contents(framework_dir: Path, state: InstallationState) -> None:
        for sub in FRAMEWORK_SUBDIRS:
            if not (framework_dir / sub).is_dir():
                state.issues.append(f"Missing framework directory: {sub}")

        core_dir = framework_dir / "core"
        if core_dir.is_dir():
            for sub in CORE_SUBDIRS:
                if not (core_dir / sub).is_dir():
                    state.issues.append(f"Missing core subdirectory: core/{sub}")

        state.framework_dir_writable = is_writable(framework_dir)
        if not state.framework_dir_writable:
            state.issues.append(f"{FRAMEWORK_DIR} directory is not writable")

    @staticmethod
    def _cross_check(state: InstallationState) -> None:
        present = [name for name, exists in state.integration_dirs.items() if exists]

        if state.framework_dir_exists and not present:
            state.issues.append(
                f"Partial installation detected: {FRAMEWORK_DIR} exists "
                f"but no integration directory was found"
            )
        if present and not state.framework_dir_exists:
            state.issues.append(
                f"Partial installation detected: {', '.join(present)} exists "
                f"but {FRAMEWORK_DIR} is missing"
            )

        total = len(state.symlinks)
        valid = state.valid_symlink_count
        if 0 < valid < total:
            state.issues.append(f"Some symlinks are broken or invalid ({valid}/{total} valid)")
        if state.framework_dir_exists and present and valid == 0:
            state.issues.append(
                "Installation directories exist but no strategic symlinks were found"
            )
