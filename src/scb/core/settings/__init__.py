"""
Settings merge engine for the Claude integration directory.

Exports:
    SettingsService: process/clean .claude/settings.json
    SettingsDocument: typed settings document
    FrameworkHookPolicy: identity rules for framework hooks
    merge_settings, strip_framework_hooks: pure document transforms
"""

from scb.core.settings.models import (
    HookEntry,
    HookMatcher,
    HooksSection,
    PermissionsSection,
    SettingsDocument,
)
from scb.core.settings.policy import DEFAULT_HOOK_POLICY, FrameworkHookPolicy
from scb.core.settings.service import (
    CleanOutcome,
    SettingsService,
    merge_settings,
    rewrite_framework_hooks,
    strip_framework_hooks,
)

__all__ = [
    "DEFAULT_HOOK_POLICY",
    "CleanOutcome",
    "FrameworkHookPolicy",
    "HookEntry",
    "HookMatcher",
    "HooksSection",
    "PermissionsSection",
    "SettingsDocument",
    "SettingsService",
    "merge_settings",
    "rewrite_framework_hooks",
    "strip_framework_hooks",
]
