"""
Installation plan and result models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from scb.core.templates.models import Template


class InstallationType(str, Enum):
    """How an install run treats the existing framework directory."""

    NEW = "new"
    UPDATE = "update"
    OVERWRITE = "overwrite"

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    InstallationType.NEW: "New Installation",
    InstallationType.UPDATE: "Update Core Only",
    InstallationType.OVERWRITE: "Full Overwrite",
}


def classify_installation(force: bool, force_core: bool, is_installed: bool) -> InstallationType:
    """
    Pick the installation type from the flags and current state.

    An installed target with no flags is an overwrite; callers gate that case
    behind confirmation before getting here.
    """
    if force:
        return InstallationType.OVERWRITE
    if force_core:
        return InstallationType.UPDATE
    if not is_installed:
        return InstallationType.NEW
    return InstallationType.OVERWRITE


class InstallationPlan(BaseModel):
    """
    Everything an install run will do, computed before touching the disk.

    Paths in the will_* lists are relative to the target directory. A plan
    with errors is never executed.
    """

    target_dir: str = Field(description="Absolute target directory")
    installation_type: InstallationType
    template: Template
    is_installed: bool = Field(default=False, description="Target state before the run")

    will_create: list[str] = Field(default_factory=list)
    will_replace: list[str] = Field(default_factory=list)
    will_preserve: list[str] = Field(default_factory=list)
    symlinks_to_create: list[str] = Field(default_factory=list)
    symlinks_to_update: list[str] = Field(default_factory=list)
    directories_to_create: list[str] = Field(default_factory=list)

    backup_required: bool = Field(default=False)
    backup_dir: str | None = Field(default=None)

    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    has_conflicts: bool = Field(default=False)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def add_error(self, error: str) -> None:
        self.errors.append(error)
        self.has_conflicts = True

    def is_valid(self) -> bool:
        return not self.has_conflicts and not self.errors

    def requires_confirmation(self) -> bool:
        return bool(self.will_replace) or self.has_conflicts or bool(self.warnings)


class InstallResult(BaseModel):
    """Outcome of executing a plan."""

    target_dir: str
    installation_type: InstallationType
    template_id: str
    installed_commit: str
    backup_dir: str | None = Field(default=None)
    settings_file: str | None = Field(default=None)
    pre_install_ran: bool = Field(default=False)
    post_install_ran: bool = Field(default=False)
    temp_cleaned: bool = Field(default=False, description="Fetched source directory was removed")
    warnings: list[str] = Field(default_factory=list)
