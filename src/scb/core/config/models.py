"""
Configuration models for installer operations.

InstallConfig and CleanConfig are immutable values built once by the CLI and
handed to the planner and cleanup engine. UserSettings describes the optional
user/project defaults files loaded by scb.core.config.loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from scb.core.errors import ConfigValidationError
from scb.core.templates.registry import DEFAULT_TEMPLATE_ID

DEFAULT_GIT_TIMEOUT = 300


class GitignoreMode(str, Enum):
    """How framework files are exposed to version control."""

    TRACK = "track"
    ALL = "all"
    NON_USER = "non-user"


@dataclass(frozen=True)
class InstallConfig:
    """Options for a single install/update run."""

    target_dir: Path
    template_id: str = DEFAULT_TEMPLATE_ID
    force: bool = False
    force_core: bool = False
    skip_confirm: bool = False
    no_backup: bool = False
    dry_run: bool = False
    verbose: bool = False
    gitignore_mode: GitignoreMode = GitignoreMode.TRACK
    git_timeout: int = DEFAULT_GIT_TIMEOUT

    def validate(self) -> None:
        """
        Check the options for contradictions before any planning happens.

        Raises:
            ConfigValidationError: If the options cannot be honoured together
        """
        if self.force and self.force_core:
            raise ConfigValidationError(
                "cannot specify both --force and --force-core",
                context={"operation": "validate install config"},
            )
        if not str(self.target_dir).strip():
            raise ConfigValidationError("target directory cannot be empty")
        if not self.template_id:
            raise ConfigValidationError("template id cannot be empty")
        if not isinstance(self.gitignore_mode, GitignoreMode):
            raise ConfigValidationError(f"invalid gitignore mode: {self.gitignore_mode}")
        if self.git_timeout < 1:
            raise ConfigValidationError(
                f"git timeout must be at least 1 second, got {self.git_timeout}"
            )


@dataclass(frozen=True)
class CleanConfig:
    """Options for removing an installation."""

    target_dir: Path
    force: bool = False
    partial: bool = False

    def validate(self) -> None:
        if not str(self.target_dir).strip():
            raise ConfigValidationError("target directory cannot be empty")


class UserSettings(BaseModel):
    """
    Defaults read from config files and environment variables.

    Only values the operator is likely to want to pin are exposed; command-line
    flags always win over these.
    """

    template: str = Field(default=DEFAULT_TEMPLATE_ID, description="Default template id")
    gitignore_mode: GitignoreMode = Field(
        default=GitignoreMode.TRACK, description="Default ignore-file policy"
    )
    no_backup: bool = Field(default=False, description="Skip framework backups by default")
    git_timeout: int = Field(
        default=DEFAULT_GIT_TIMEOUT, ge=1, description="Seconds allowed per git operation"
    )

    model_config = ConfigDict(
        extra="allow",  # Unknown keys are tolerated for forward compatibility
    )
