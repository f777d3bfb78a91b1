"""
Installation cleanup service.

Removes a framework installation from a project while leaving anything the
user created in place:
- Only symlinks pointing at framework targets are removed
- The framework directory is removed through the name-restricted primitive
- Framework hooks are stripped from settings.json
- Integration directories are removed only when empty; leftovers are reported
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from scb.core.config.constants import FRAMEWORK_DIR, INTEGRATION_LAYOUTS, IntegrationLayout
from scb.core.errors import InstallerError
from scb.core.filesystem import remove_named_directory
from scb.core.settings.service import CleanOutcome, SettingsService
from scb.core.status.detector import StatusDetector
from scb.core.status.models import InstallationState
from scb.core.symlinks.manager import SymlinkManager

logger = logging.getLogger(__name__)

NOTHING_INSTALLED_WARNING = "No Strategic Claude Basic installation found"


@dataclass
class CleanupResult:
    """Results of a cleanup operation."""

    # Whether the framework directory was removed
    removed_directory: bool = False

    # Symlinks that were removed (relative to the target)
    removed_symlinks: list[str] = field(default_factory=list)

    # Whether settings.json was cleaned or removed
    cleaned_settings: bool = False

    # Paths left in place, with settings notes
    preserved_files: list[str] = field(default_factory=list)

    # Empty directories that were removed
    cleaned_directories: list[str] = field(default_factory=list)

    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def removed_anything(self) -> bool:
        return self.removed_directory or bool(self.removed_symlinks)

    def summary(self) -> str:
        """Generate a human-readable summary of the cleanup."""
        parts = []

        if self.removed_directory:
            parts.append(f"Removed {FRAMEWORK_DIR}")

        if self.removed_symlinks:
            parts.append(f"Removed {len(self.removed_symlinks)} symlink(s)")

        if self.cleaned_settings:
            parts.append("Cleaned settings.json")

        if self.cleaned_directories:
            parts.append(f"Removed {len(self.cleaned_directories)} empty director(ies)")

        if self.preserved_files:
            parts.append(f"Preserved {len(self.preserved_files)} item(s)")

        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")

        if not parts:
            return "No cleanup actions needed"

        return ", ".join(parts)


class CleanupError(InstallerError):
    """Raised when cleanup cannot continue; carries the partial result."""

    def __init__(self, message: str, *, result: CleanupResult, cause: BaseException | None = None):
        super().__init__(message, cause=cause)
        self.result = result


class CleanupService:
    """
    Service for removing an installation from a target directory.

    Example:
        >>> service = CleanupService()
        >>> result = service.remove_installation(Path("/path/to/project"))
        >>> print(result.summary())
    """

    def __init__(
        self,
        detector: StatusDetector | None = None,
        symlinks: SymlinkManager | None = None,
        settings: SettingsService | None = None,
        layouts: tuple[IntegrationLayout, ...] = INTEGRATION_LAYOUTS,
    ) -> None:
        self.detector = detector or StatusDetector(layouts)
        self.symlinks = symlinks or SymlinkManager(layouts)
        self.settings = settings or SettingsService()
        self.layouts = layouts

    @staticmethod
    def nothing_installed(state: InstallationState) -> bool:
        """No framework directory and nothing at any framework symlink path."""
        return (
            not state.is_installed
            and not state.framework_dir_exists
            and not any(s.exists for s in state.symlinks)
        )

    def remove_installation(self, target_dir: Path | str) -> CleanupResult:
        """
        Remove the installation in `target_dir`.

        Raises:
            NotFoundError: If the target directory does not exist
            CleanupError: If the framework directory cannot be removed
        """
        state = self.detector.check_installation(target_dir)
        target = Path(state.target_dir)
        result = CleanupResult()

        if self.nothing_installed(state):
            result.warnings.append(NOTHING_INSTALLED_WARNING)
            return result

        owned = self.symlinks.remove_owned(target)
        result.removed_symlinks.extend(owned.removed)
        result.preserved_files.extend(owned.preserved)
        result.warnings.extend(owned.warnings)

        self._remove_framework_directory(target, result)

        if result.removed_anything:
            self._clean_settings(target, result)

        self._prune_empty_directories(target, result)
        self._validate_cleanup(target, result)

        logger.info(f"Cleanup of {target}: {result.summary()}")
        return result

    def handle_partial_installation(self, target_dir: Path | str) -> CleanupResult:
        """
        Clean up after an interrupted run.

        Only symlinks already flagged invalid are removed, and only if they are
        actually symlinks. The framework directory is removed and empty
        integration directories are pruned.
        """
        state = self.detector.check_installation(target_dir)
        target = Path(state.target_dir)
        result = CleanupResult()
        result.warnings.append("Handling partial installation cleanup")

        for status in state.symlinks:
            if not status.exists or status.valid:
                continue
            link = Path(status.path)
            if not link.is_symlink():
                result.preserved_files.append(status.qualified_name)
                result.warnings.append(f"Preserving non-symlink file: {link}")
                continue
            try:
                link.unlink()
            except OSError as e:
                result.warnings.append(f"Could not remove broken symlink {link}: {e}")
                continue
            result.removed_symlinks.append(status.qualified_name)

        if state.framework_dir_exists:
            self._remove_framework_directory(target, result)

        self._prune_empty_directories(target, result)
        return result

    # =========================================================================
    # Steps
    # =========================================================================

    @staticmethod
    def _remove_framework_directory(target: Path, result: CleanupResult) -> None:
        try:
            result.removed_directory = remove_named_directory(target / FRAMEWORK_DIR, FRAMEWORK_DIR)
        except InstallerError as e:
            result.errors.append(f"Failed to remove {FRAMEWORK_DIR} directory: {e}")
            raise CleanupError(
                f"failed to remove {FRAMEWORK_DIR} from {target}", result=result, cause=e
            ) from e

    def _clean_settings(self, target: Path, result: CleanupResult) -> None:
        try:
            outcome = self.settings.clean_settings(target)
        except InstallerError as e:
            result.warnings.append(f"Warning during settings cleanup: {e}")
            return

        if outcome == CleanOutcome.REMOVED:
            result.cleaned_settings = True
            result.preserved_files.append("settings.json removed (was empty after cleanup)")
        elif outcome == CleanOutcome.CLEANED:
            result.cleaned_settings = True
            result.preserved_files.append("settings.json (cleaned of strategic hooks)")

    def _prune_empty_directories(self, target: Path, result: CleanupResult) -> None:
        for layout in self.layouts:
            root = target / layout.dirname
            if not root.is_dir() or root.is_symlink():
                continue
            for path in [*(root / sub for sub in layout.subdirs), root]:
                self._remove_if_empty(target, path, result)

    @staticmethod
    def _remove_if_empty(target: Path, path: Path, result: CleanupResult) -> None:
        if not path.is_dir() or path.is_symlink():
            return
        try:
            entries = sorted(path.iterdir())
            if entries:
                result.preserved_files.extend(str(entry.relative_to(target)) for entry in entries)
                return
            path.rmdir()
        except OSError as e:
            result.warnings.append(f"Warning during directory cleanup of {path}: {e}")
            return
        result.cleaned_directories.append(str(path.relative_to(target)))

    def _validate_cleanup(self, target: Path, result: CleanupResult) -> None:
        try:
            state = self.detector.check_installation(target)
        except InstallerError as e:
            result.warnings.append(f"Cleanup validation warning: {e}")
            return

        if state.framework_dir_exists:
            result.warnings.append(f"{FRAMEWORK_DIR} directory still exists after cleanup")
        for status in state.symlinks:
            if status.exists and status.valid:
                result.warnings.append(f"Strategic Claude symlink still exists: {status.path}")
