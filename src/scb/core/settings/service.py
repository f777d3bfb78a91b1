"""
Settings merge engine for .claude/settings.json.

Merges the framework's settings template into a project's existing settings
without duplicating hooks or touching user permissions, and strips framework
hooks back out on uninstall.

Merge rules:
    - Permissions come from the existing document only. Template permissions
      are never applied.
    - For each managed hook type, existing matchers keep their order and
      contents; template hooks are appended under their matcher only when no
      hook with the same normalized command is already there.
    - Every framework hook is then rewritten to its canonical command.

Clean rules:
    - Framework hooks are removed; matchers left without hooks are dropped.
    - If nothing worth keeping remains, the file is deleted.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from scb.core.config.constants import (
    CLAUDE_DIR,
    FRAMEWORK_DIR,
    SETTINGS_BACKUP_PREFIX,
    SETTINGS_FILE,
    SETTINGS_TEMPLATE_FILE,
)
from scb.core.errors import SettingsError, filesystem_error
from scb.core.filesystem import backup_file, write_json_atomic
from scb.core.settings.models import (
    HOOK_FIELDS,
    HookEntry,
    HookMatcher,
    HooksSection,
    SettingsDocument,
)
from scb.core.settings.policy import DEFAULT_HOOK_POLICY, FrameworkHookPolicy

logger = logging.getLogger(__name__)


class CleanOutcome(str, Enum):
    """What clean_settings() did to the settings file."""

    NOT_FOUND = "not_found"
    CLEANED = "cleaned"
    REMOVED = "removed"


def _merge_matchers(
    existing: list[HookMatcher],
    template: list[HookMatcher],
    policy: FrameworkHookPolicy,
) -> list[HookMatcher]:
    # matcher -> (first HookMatcher seen, accumulated hooks); a missing matcher is ""
    merged: dict[str, tuple[HookMatcher, list[HookEntry]]] = {}

    for matcher in existing:
        key = matcher.matcher or ""
        if key not in merged:
            merged[key] = (matcher, [])
        merged[key][1].extend(h.model_copy(deep=True) for h in matcher.hooks)

    for matcher in template:
        key = matcher.matcher or ""
        if key not in merged:
            merged[key] = (matcher, [])
        hooks = merged[key][1]
        present = {policy.normalize(h.command) for h in hooks}
        for hook in matcher.hooks:
            identity = policy.normalize(hook.command)
            if identity not in present:
                hooks.append(hook.model_copy(deep=True))
                present.add(identity)

    return [
        first.model_copy(update={"hooks": hooks}, deep=True)
        for first, hooks in merged.values()
        if hooks
    ]


def rewrite_framework_hooks(hooks: HooksSection, policy: FrameworkHookPolicy) -> None:
    """Point every framework hook at its canonical script location, in place."""
    for hook_type in HOOK_FIELDS:
        for matcher in hooks.matchers(hook_type):
            for hook in matcher.hooks:
                hook.command = policy.canonical(hook.command)


def merge_settings(
    template: SettingsDocument,
    existing: SettingsDocument | None,
    policy: FrameworkHookPolicy = DEFAULT_HOOK_POLICY,
) -> SettingsDocument:
    """
    Merge a template settings document into an existing one.

    Args:
        template: Framework-provided settings
        existing: The project's current settings, or None if absent
        policy: Framework hook identity rules

    Returns:
        A new document; neither input is modified
    """
    result = existing.model_copy(deep=True) if existing is not None else SettingsDocument()
    existing_hooks = result.hooks or HooksSection()
    template_hooks = template.hooks or HooksSection()

    merged_hooks = existing_hooks.model_copy(deep=True)
    for hook_type in HOOK_FIELDS:
        merged_hooks.set_matchers(
            hook_type,
            _merge_matchers(
                existing_hooks.matchers(hook_type),
                template_hooks.matchers(hook_type),
                policy,
            ),
        )
    rewrite_framework_hooks(merged_hooks, policy)

    result.hooks = merged_hooks
    # permissions stay exactly as the existing document had them (or absent)
    return result


def strip_framework_hooks(
    document: SettingsDocument,
    policy: FrameworkHookPolicy = DEFAULT_HOOK_POLICY,
) -> SettingsDocument:
    """Return a copy of `document` with every framework hook removed."""
    result = document.model_copy(deep=True)
    if result.hooks is None:
        return result

    for hook_type in HOOK_FIELDS:
        kept: list[HookMatcher] = []
        for matcher in result.hooks.matchers(hook_type):
            hooks = [h for h in matcher.hooks if not policy.is_framework_hook(h.command)]
            if hooks:
                kept.append(matcher.model_copy(update={"hooks": hooks}))
        result.hooks.set_matchers(hook_type, kept)
    return result


class SettingsService:
    """
    Reads, merges, cleans and writes a project's settings document.

    Example:
        >>> service = SettingsService()
        >>> service.process_settings(Path("/path/to/project"))
    """

    def __init__(self, policy: FrameworkHookPolicy = DEFAULT_HOOK_POLICY) -> None:
        self.policy = policy

    @staticmethod
    def settings_path(target_dir: Path) -> Path:
        return target_dir / CLAUDE_DIR / SETTINGS_FILE

    @staticmethod
    def template_path(target_dir: Path) -> Path:
        return target_dir / FRAMEWORK_DIR / SETTINGS_TEMPLATE_FILE

    def load(self, path: Path) -> SettingsDocument:
        """
        Parse a settings document.

        Raises:
            SettingsError: If the file is not a valid settings object
            PermissionDeniedError: If the file cannot be read
        """
        try:
            with path.open() as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingsError(
                f"invalid JSON in {path}", cause=e, context={"path": str(path)}
            ) from e
        except OSError as e:
            raise filesystem_error("read settings", path, e) from e

        if not isinstance(data, dict):
            raise SettingsError(
                f"settings document {path} is not a JSON object", context={"path": str(path)}
            )
        try:
            return SettingsDocument.model_validate(data)
        except ValidationError as e:
            raise SettingsError(
                f"unexpected settings structure in {path}", cause=e, context={"path": str(path)}
            ) from e

    def save(self, path: Path, document: SettingsDocument) -> None:
        write_json_atomic(path, document.to_dict())

    def process_settings(self, target_dir: Path) -> Path | None:
        """
        Merge the framework settings template into the project's settings.

        Backs up an existing settings file before touching it. Does nothing if
        the installed framework ships no settings template.

        Returns:
            Path of the written settings file, or None if there was no template
        """
        template_path = self.template_path(target_dir)
        if not template_path.exists():
            logger.debug(f"No settings template at {template_path}, skipping")
            return None

        settings_path = self.settings_path(target_dir)
        existing: SettingsDocument | None = None
        if settings_path.exists():
            backup = backup_file(settings_path, SETTINGS_BACKUP_PREFIX, ".json")
            logger.info(f"Backed up settings to {backup}")
            existing = self.load(settings_path)

        template = self.load(template_path)
        merged = merge_settings(template, existing, self.policy)
        self.save(settings_path, merged)
        logger.info(f"Wrote merged settings to {settings_path}")
        return settings_path

    def clean_settings(self, target_dir: Path) -> CleanOutcome:
        """
        Remove framework hooks from the project's settings.

        Returns:
            What happened to the settings file
        """
        settings_path = self.settings_path(target_dir)
        if not settings_path.exists():
            return CleanOutcome.NOT_FOUND

        backup_file(settings_path, SETTINGS_BACKUP_PREFIX, ".json")
        cleaned = strip_framework_hooks(self.load(settings_path), self.policy)

        if cleaned.is_empty():
            try:
                settings_path.unlink()
            except OSError as e:
                raise filesystem_error("remove settings", settings_path, e) from e
            logger.info(f"Removed {settings_path} (empty after cleanup)")
            return CleanOutcome.REMOVED

        self.save(settings_path, cleaned)
        logger.info(f"Removed framework hooks from {settings_path}")
        return CleanOutcome.CLEANED
