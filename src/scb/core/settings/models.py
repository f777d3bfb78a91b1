"""
Typed schema for the Claude settings document (.claude/settings.json).

The five hook types the framework manages are explicit fields so merge and
clean logic cover each of them. Anything else found in a user's document
(other top-level keys, other hook types, extra per-hook keys such as
"timeout", permission keys such as "deny") is carried through unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# JSON key -> model field for the managed hook types, in output order
HOOK_FIELDS: dict[str, str] = {
    "PreToolUse": "pre_tool_use",
    "PostToolUse": "post_tool_use",
    "Stop": "stop",
    "PreCompact": "pre_compact",
    "Notification": "notification",
}


class HookEntry(BaseModel):
    """A single hook command."""

    type: str = Field(default="command", description="Hook type, normally 'command'")
    command: str = Field(default="", description="Command line to execute")

    model_config = ConfigDict(extra="allow")


class HookMatcher(BaseModel):
    """A tool matcher and the hooks registered under it."""

    matcher: str | None = Field(default=None, description="Tool name pattern")
    hooks: list[HookEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HooksSection(BaseModel):
    """The `hooks` object of the settings document."""

    pre_tool_use: list[HookMatcher] = Field(default_factory=list, alias="PreToolUse")
    post_tool_use: list[HookMatcher] = Field(default_factory=list, alias="PostToolUse")
    stop: list[HookMatcher] = Field(default_factory=list, alias="Stop")
    pre_compact: list[HookMatcher] = Field(default_factory=list, alias="PreCompact")
    notification: list[HookMatcher] = Field(default_factory=list, alias="Notification")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def matchers(self, hook_type: str) -> list[HookMatcher]:
        return getattr(self, HOOK_FIELDS[hook_type])

    def set_matchers(self, hook_type: str, matchers: list[HookMatcher]) -> None:
        setattr(self, HOOK_FIELDS[hook_type], matchers)

    def has_entries(self) -> bool:
        """True if any hook type (managed or not) still holds something."""
        for hook_type in HOOK_FIELDS:
            if any(m.hooks for m in self.matchers(hook_type)):
                return True
        return any(self.model_extra.values()) if self.model_extra else False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for hook_type in HOOK_FIELDS:
            matchers = self.matchers(hook_type)
            if matchers:
                data[hook_type] = [m.to_dict() for m in matchers]
        if self.model_extra:
            data.update(self.model_extra)
        return data


class PermissionsSection(BaseModel):
    """The `permissions` object; copied through verbatim."""

    allow: list[str] | None = None
    additional_directories: list[str] | None = Field(default=None, alias="additionalDirectories")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def has_content(self) -> bool:
        if self.allow or self.additional_directories:
            return True
        return any(self.model_extra.values()) if self.model_extra else False

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SettingsDocument(BaseModel):
    """A parsed settings.json document."""

    hooks: HooksSection | None = None
    permissions: PermissionsSection | None = None

    model_config = ConfigDict(extra="allow")

    def has_hooks(self) -> bool:
        return self.hooks is not None and self.hooks.has_entries()

    def has_permissions(self) -> bool:
        return self.permissions is not None and self.permissions.has_content()

    def is_empty(self) -> bool:
        """True when nothing worth keeping on disk remains."""
        return not self.has_hooks() and not self.has_permissions() and not self.model_extra

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-ready data, omitting empty hook lists."""
        data: dict[str, Any] = {}
        if self.hooks is not None:
            hooks = self.hooks.to_dict()
            if hooks:
                data["hooks"] = hooks
        if self.permissions is not None:
            data["permissions"] = self.permissions.to_dict()
        if self.model_extra:
            data.update(self.model_extra)
        return data
