"""
Error taxonomy for installer operations.

Every failure raised by the core carries an ErrorCode describing its kind,
a human-readable message and optional context (operation, path) so the CLI
can render actionable guidance without a stack trace.

Example:
    >>> try:
    ...     create_directory(Path("/root/locked"))
    ... except PermissionDeniedError as e:
    ...     print(e.code, e.context["path"])
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCode(str, Enum):
    """Kinds of errors the installer can produce."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    SYMLINK_INVALID = "symlink_invalid"
    SYMLINK_CREATION_FAILED = "symlink_creation_failed"
    INSTALLATION_FAILED = "installation_failed"
    USER_CANCELLED = "user_cancelled"
    FILESYSTEM = "filesystem"
    SOURCE = "source"
    NETWORK = "network"
    SCRIPT = "script"
    SETTINGS = "settings"


class InstallerError(Exception):
    """Base exception for all installer errors."""

    code: ErrorCode = ErrorCode.FILESYSTEM

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.cause = cause
        self.context: dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigValidationError(InstallerError):
    """Raised when the configuration is contradictory or malformed."""

    code = ErrorCode.VALIDATION


class NotFoundError(InstallerError):
    """Raised when an expected file or directory is absent."""

    code = ErrorCode.NOT_FOUND


class PermissionDeniedError(InstallerError):
    """Raised when the operating system refuses access to a path."""

    code = ErrorCode.PERMISSION_DENIED


class AlreadyExistsError(InstallerError):
    """Raised when a path is in the way of something being created."""

    code = ErrorCode.ALREADY_EXISTS


class SymlinkError(InstallerError):
    """Raised when a symlink cannot be created, removed or validated."""

    code = ErrorCode.SYMLINK_CREATION_FAILED


class SymlinkRepairError(SymlinkError):
    """Raised when repair stops early; carries what was already repaired."""

    def __init__(self, message: str, *, repaired: list[str], cause: BaseException | None = None):
        super().__init__(message, cause=cause)
        self.repaired = repaired


class SettingsError(InstallerError):
    """Raised when a settings document cannot be read or written."""

    code = ErrorCode.SETTINGS


class MCPConfigError(InstallerError):
    """Raised when an MCP template or .mcp.json cannot be parsed."""

    code = ErrorCode.SETTINGS


class InstallationError(InstallerError):
    """Raised when an installation step or its post-condition fails."""

    code = ErrorCode.INSTALLATION_FAILED


class UserCancelledError(InstallerError):
    """Raised when the operator declines to proceed."""

    code = ErrorCode.USER_CANCELLED


class ScriptError(InstallerError):
    """Raised when a template-supplied script exits non-zero."""

    code = ErrorCode.SCRIPT

    def __init__(self, message: str, *, script: str, output: str = "", returncode: int | None = None):
        super().__init__(message, context={"script": script})
        self.script = script
        self.output = output
        self.returncode = returncode


class SourceError(InstallerError):
    """Base for failures fetching a template's content tree."""

    code = ErrorCode.SOURCE


class SourceNotFoundError(SourceError):
    """The source repository or the git executable could not be found."""

    code = ErrorCode.NOT_FOUND


class SourceTransportError(SourceError):
    """A retryable transport failure (network, timeout)."""

    code = ErrorCode.NETWORK


class RevisionNotFoundError(SourceError):
    """The pinned revision does not exist in the fetched repository."""

    code = ErrorCode.NOT_FOUND


class TemplateNotFoundError(NotFoundError):
    """Raised when a template id is not in the registry."""

    def __init__(self, template_id: str, available: list[str]):
        super().__init__(
            f"template '{template_id}' not found",
            context={"template_id": template_id, "available": available},
        )
        self.template_id = template_id
        self.available = available


def filesystem_error(operation: str, path: Path | str, exc: OSError) -> InstallerError:
    """
    Translate an OSError into the matching InstallerError kind.

    Args:
        operation: Short description of what was being attempted
        path: Path the operation targeted
        exc: The original OS error

    Returns:
        An InstallerError subclass instance with operation and path context
    """
    context = {"operation": operation, "path": str(path)}
    message = f"failed to {operation} {path}"
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(message, cause=exc, context=context)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(message, cause=exc, context=context)
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError(message, cause=exc, context=context)
    return InstallerError(message, code=ErrorCode.FILESYSTEM, cause=exc, context=context)
