"""
Installation state snapshot produced by the status detector.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from scb.core.config.constants import CLAUDE_DIR, CODEX_DIR
from scb.core.symlinks.models import SymlinkStatus
from scb.core.templates.models import TemplateInfo


class InstallationState(BaseModel):
    """
    What is currently on disk in a target directory.

    Rebuilt on every query and never persisted. `issues` and `is_installed`
    are independent: a clean, empty project has no issues and is not
    installed.
    """

    target_dir: str = Field(description="Absolute path of the inspected directory")
    framework_dir_exists: bool = Field(default=False)
    framework_dir_writable: bool = Field(default=False)
    integration_dirs: dict[str, bool] = Field(
        default_factory=dict, description="Integration directory name -> present"
    )
    symlinks: list[SymlinkStatus] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    template_info: TemplateInfo | None = Field(default=None)

    @property
    def claude_dir_exists(self) -> bool:
        return self.integration_dirs.get(CLAUDE_DIR, False)

    @property
    def codex_dir_exists(self) -> bool:
        return self.integration_dirs.get(CODEX_DIR, False)

    @property
    def any_integration_dir(self) -> bool:
        return any(self.integration_dirs.values())

    @property
    def valid_symlink_count(self) -> int:
        return sum(1 for s in self.symlinks if s.valid)

    def symlinks_for(self, integration: str) -> list[SymlinkStatus]:
        return [s for s in self.symlinks if s.integration == integration]

    @computed_field
    @property
    def is_installed(self) -> bool:
        """Framework dir, an integration dir and at least one valid symlink."""
        return (
            self.framework_dir_exists
            and self.any_integration_dir
            and self.valid_symlink_count > 0
        )


__all__ = ["InstallationState", "SymlinkStatus"]
