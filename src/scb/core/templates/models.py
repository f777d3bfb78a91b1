"""
Template and provenance models.

A Template is an immutable, pinned-revision source definition for framework
content. TemplateInfo is the provenance record written inside the framework
directory after a successful install.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

_COMMIT_RE = re.compile(r"^[0-9a-fA-F]{40}$")


class Template(BaseModel):
    """A named framework source pinned to a specific commit."""

    id: str = Field(min_length=1, description="Registry identifier")
    name: str = Field(min_length=1, description="Human-readable name")
    description: str = Field(default="", description="What the template is for")
    repo_url: str = Field(min_length=1, description="Git repository URL")
    branch: str = Field(min_length=1, description="Branch to clone")
    commit: str = Field(description="Pinned 40-character commit hash")
    language: str = Field(default="", description="Target language, empty for any")
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)

    @field_validator("commit")
    @classmethod
    def validate_commit(cls, v: str) -> str:
        """Pinned revisions must be full 40-character hex hashes."""
        if not _COMMIT_RE.match(v):
            raise ValueError("template commit must be a valid 40-character hex string")
        return v

    @property
    def display_name(self) -> str:
        if self.deprecated:
            return f"{self.name} (deprecated)"
        return self.name

    def short_description(self, max_length: int = 60) -> str:
        if len(self.description) <= max_length:
            return self.description
        return self.description[: max_length - 3] + "..."

    def has_tag(self, tag: str) -> bool:
        return any(t.lower() == tag.lower() for t in self.tags)


class TemplateInfo(BaseModel):
    """Provenance record persisted as .strategic-claude-basic/.template-info."""

    template: Template
    installed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the template was installed",
    )
    installed_commit: str = Field(description="Commit that was checked out")
    metadata: dict[str, str] = Field(default_factory=dict)
