"""
Symlink management for integration directories.

Each integration directory (.claude, .codex) exposes framework content through
a fixed set of relative symlinks. The manager creates, validates, repairs and
removes them.

Two removal operations exist on purpose:
    - remove_all(): unconditional, by name. Used by update/repair flows.
    - remove_owned(): only removes links whose target string is one the
      framework itself creates. Used by destructive cleanup.

Usage:
    >>> manager = SymlinkManager()
    >>> manager.create_all(Path("/path/to/project"))
    >>> all(s.valid for s in manager.validate_all(Path("/path/to/project")))
    True
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from scb.core.config.constants import (
    INTEGRATION_LAYOUTS,
    IntegrationLayout,
    SymlinkSpec,
    all_spec_targets,
)
from scb.core.errors import (
    ErrorCode,
    InstallerError,
    SymlinkError,
    SymlinkRepairError,
    filesystem_error,
)
from scb.core.filesystem import create_directory, ensure_directories
from scb.core.symlinks.models import OwnedRemovalResult, SymlinkStatus

logger = logging.getLogger(__name__)


def _link_error(operation: str, path: Path, exc: OSError) -> InstallerError:
    """Permission problems keep their own kind; everything else is a symlink error."""
    if isinstance(exc, PermissionError):
        return filesystem_error(operation, path, exc)
    return SymlinkError(
        f"failed to {operation} {path}",
        cause=exc,
        context={"operation": operation, "path": str(path)},
    )


def inspect_symlink(target_dir: Path, layout: IntegrationLayout, spec: SymlinkSpec) -> SymlinkStatus:
    """
    Check one symlink against its spec.

    A link is valid when it exists, is a symlink, its literal readlink value
    equals the expected target and the resolved path exists.
    """
    link = target_dir / layout.dirname / spec.name
    status = SymlinkStatus(name=spec.name, integration=layout.dirname, path=str(link))

    try:
        info = link.lstat()
    except FileNotFoundError:
        return status
    except OSError as e:
        status.error = f"cannot stat symlink: {e}"
        return status

    status.exists = True
    if not stat.S_ISLNK(info.st_mode):
        status.error = "path exists but is not a symlink"
        return status

    try:
        status.target = os.readlink(link)
    except OSError as e:
        status.error = f"cannot read symlink: {e}"
        return status

    if status.target != spec.target:
        status.error = f"symlink points to {status.target}, expected {spec.target}"
        return status

    if not link.exists():
        status.error = f"symlink target does not exist: {link.parent / status.target}"
        return status

    status.valid = True
    return status


class SymlinkManager:
    """Creates, validates, repairs and removes framework symlinks."""

    def __init__(self, layouts: tuple[IntegrationLayout, ...] = INTEGRATION_LAYOUTS) -> None:
        self.layouts = layouts

    def ensure_structure(self, target_dir: Path) -> None:
        """Create every integration directory and its required subdirectories."""
        for layout in self.layouts:
            ensure_directories(target_dir / layout.dirname, layout.subdirs)

    def create_all(self, target_dir: Path) -> None:
        """
        Create (or recreate) every symlink in every integration directory.

        Existing symlinks at a managed path are replaced without comparison.

        Raises:
            PermissionDeniedError: If a directory or link cannot be created
            SymlinkError: If a non-symlink occupies a link path
        """
        self.ensure_structure(target_dir)
        for layout in self.layouts:
            for spec in layout.symlinks:
                self._create(target_dir, layout, spec)
        logger.info(f"Created framework symlinks in {target_dir}")

    def remove_all(self, target_dir: Path) -> None:
        """Remove every managed link path that exists, without checking ownership."""
        for layout in self.layouts:
            for spec in layout.symlinks:
                self._remove(target_dir / layout.dirname / spec.name)

    def update_all(self, target_dir: Path) -> None:
        self.remove_all(target_dir)
        self.create_all(target_dir)

    def validate_all(self, target_dir: Path) -> list[SymlinkStatus]:
        """Inspect every symlink of every integration directory, in layout order."""
        return [
            inspect_symlink(target_dir, layout, spec)
            for layout in self.layouts
            for spec in layout.symlinks
        ]

    def repair_broken(self, target_dir: Path) -> list[str]:
        """
        Recreate only the symlinks that are currently invalid.

        Returns:
            Qualified names (e.g. ".claude/agents/strategic") that were repaired

        Raises:
            SymlinkRepairError: On the first failure, carrying what was repaired
        """
        repaired: list[str] = []
        for layout in self.layouts:
            for spec in layout.symlinks:
                status = inspect_symlink(target_dir, layout, spec)
                if status.valid:
                    continue
                try:
                    if status.exists:
                        self._remove(Path(status.path))
                    create_directory(Path(status.path).parent)
                    self._create(target_dir, layout, spec)
                except InstallerError as e:
                    raise SymlinkRepairError(
                        f"failed to repair {status.qualified_name}",
                        repaired=repaired,
                        cause=e,
                    ) from e
                repaired.append(status.qualified_name)
                logger.info(f"Repaired symlink {status.qualified_name}")
        return repaired

    def remove_owned(self, target_dir: Path) -> OwnedRemovalResult:
        """
        Remove only symlinks whose target string the framework itself creates.

        Non-symlinks and foreign symlinks at managed paths are preserved and
        reported. Removal failures become warnings; the sweep always finishes.
        """
        result = OwnedRemovalResult()
        known_targets = all_spec_targets()

        for layout in self.layouts:
            for spec in layout.symlinks:
                link = target_dir / layout.dirname / spec.name
                relative = f"{layout.dirname}/{spec.name}"
                if not link.is_symlink():
                    if link.exists():
                        result.preserved.append(relative)
                        result.warnings.append(f"Preserving non-symlink file: {link}")
                    continue

                try:
                    current = os.readlink(link)
                except OSError as e:
                    result.warnings.append(f"Failed to read symlink {link}: {e}")
                    continue

                if current not in known_targets:
                    result.preserved.append(relative)
                    result.warnings.append(f"Preserving non-Strategic Claude symlink: {link}")
                    continue

                try:
                    link.unlink()
                except OSError as e:
                    result.warnings.append(f"Failed to remove symlink {link}: {e}")
                    continue
                result.removed.append(relative)
                logger.debug(f"Removed symlink {link}")

        return result

    # =========================================================================
    # Internals
    # =========================================================================

    def _create(self, target_dir: Path, layout: IntegrationLayout, spec: SymlinkSpec) -> None:
        link = target_dir / layout.dirname / spec.name
        if link.is_symlink():
            try:
                link.unlink()
            except OSError as e:
                raise _link_error("replace symlink", link, e) from e
        elif link.exists():
            raise SymlinkError(
                f"cannot create symlink {link}: path exists and is not a symlink",
                code=ErrorCode.ALREADY_EXISTS,
                context={"operation": "create symlink", "path": str(link)},
            )
        try:
            link.symlink_to(spec.target)
        except OSError as e:
            raise _link_error("create symlink", link, e) from e
        logger.debug(f"Linked {link} -> {spec.target}")

    def _remove(self, link: Path) -> None:
        if not link.exists() and not link.is_symlink():
            return
        try:
            if link.is_dir() and not link.is_symlink():
                link.rmdir()
            else:
                link.unlink()
        except OSError as e:
            raise _link_error("remove", link, e) from e
        logger.debug(f"Removed {link}")
