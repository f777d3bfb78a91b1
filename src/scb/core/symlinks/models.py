"""
Data models for symlink inspection and removal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field


class SymlinkStatus(BaseModel):
    """Validity of one framework symlink, computed fresh on every check."""

    name: str = Field(description="Logical name, e.g. agents/strategic")
    integration: str = Field(description="Integration directory holding the link")
    path: str = Field(description="Absolute path of the link")
    exists: bool = Field(default=False, description="Whether anything exists at the path")
    valid: bool = Field(default=False, description="Whether the link points at its expected target")
    target: str = Field(default="", description="Raw readlink value, if a symlink")
    error: str | None = Field(default=None, description="Why the link is invalid")

    @property
    def qualified_name(self) -> str:
        return f"{self.integration}/{self.name}"


@dataclass
class OwnedRemovalResult:
    """Outcome of removing only the symlinks the framework owns."""

    removed: list[str] = field(default_factory=list)
    preserved: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
