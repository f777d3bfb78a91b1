"""
Classification of framework-owned hook commands.

The settings engine never hardcodes which hooks belong to the framework; it
asks a FrameworkHookPolicy. The default policy recognises the hook scripts
shipped in core/hooks by basename, wherever they currently live on disk.
"""

from __future__ import annotations

from dataclasses import dataclass

from scb.core.config.constants import FRAMEWORK_HOOK_SCRIPTS, HOOK_COMMAND_PREFIX


@dataclass(frozen=True)
class FrameworkHookPolicy:
    """Identity and rewrite rules for framework hook commands."""

    script_names: tuple[str, ...] = FRAMEWORK_HOOK_SCRIPTS
    command_prefix: str = HOOK_COMMAND_PREFIX

    def script_for(self, command: str) -> str | None:
        """
        Return the framework script a command invokes, if any.

        A command matches when it is the bare script name or ends with the
        script name after a path separator or a space.
        """
        command = command.strip()
        for name in self.script_names:
            if command == name or command.endswith(f"/{name}") or command.endswith(f" {name}"):
                return name
        return None

    def is_framework_hook(self, command: str) -> bool:
        return self.script_for(command) is not None

    def normalize(self, command: str) -> str:
        """Identity key: the script name for framework hooks, else the command."""
        return self.script_for(command) or command.strip()

    def canonical(self, command: str) -> str:
        """Rewrite framework hooks to the canonical invocation; leave others alone."""
        name = self.script_for(command)
        if name is None:
            return command
        return f"{self.command_prefix}{name}"


DEFAULT_HOOK_POLICY = FrameworkHookPolicy()
