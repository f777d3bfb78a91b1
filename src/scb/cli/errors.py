"""
Standardized error handling and exit codes for the installer CLI.

This module maps installer error kinds to exit codes and prints consistent
error messages with actionable guidance.
"""

from enum import IntEnum

from rich.console import Console

from scb.core.errors import ErrorCode, InstallerError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for installer CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic or unexpected error."""

    VALIDATION_ERROR = 2
    """Invalid or contradictory options."""

    PERMISSION_ERROR = 3
    """The operating system refused access to a path."""

    NETWORK_ERROR = 4
    """The template source could not be reached."""

    USER_CANCELLED = 5
    """The operator declined to proceed."""

    INSTALLATION_ERROR = 6
    """Installation ran but did not produce a valid result."""

    ALREADY_INSTALLED = 7
    """The framework is already installed and no force flag was given."""

    NOT_INSTALLED = 8
    """No installation was found where one was required."""


_EXIT_CODES: dict[ErrorCode, ExitCode] = {
    ErrorCode.VALIDATION: ExitCode.VALIDATION_ERROR,
    ErrorCode.PERMISSION_DENIED: ExitCode.PERMISSION_ERROR,
    ErrorCode.NETWORK: ExitCode.NETWORK_ERROR,
    ErrorCode.USER_CANCELLED: ExitCode.USER_CANCELLED,
    ErrorCode.INSTALLATION_FAILED: ExitCode.INSTALLATION_ERROR,
    ErrorCode.SCRIPT: ExitCode.INSTALLATION_ERROR,
}

_SOLUTIONS: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION: "Check the command options with --help",
    ErrorCode.PERMISSION_DENIED: "Check ownership and permissions of the target directory",
    ErrorCode.NETWORK: "Check your network connection and try again",
    ErrorCode.NOT_FOUND: "Check that the path or template id exists",
    ErrorCode.INSTALLATION_FAILED: "Run the status command to see what is missing",
    ErrorCode.SYMLINK_CREATION_FAILED: "Run the repair command to recreate symlinks",
    ErrorCode.SYMLINK_INVALID: "Run the repair command to recreate symlinks",
}


def exit_code_for(error: InstallerError) -> ExitCode:
    return _EXIT_CODES.get(error.code, ExitCode.GENERAL_ERROR)


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_installer_error(error: InstallerError, *, operation: str) -> ExitCode:
    """
    Print an installer error and return the exit code to use.

    Args:
        error: The error raised by the core
        operation: What the CLI was doing, e.g. "installation"
    """
    reason = None
    if path := error.context.get("path"):
        reason = f"Path: {path}"
    print_error(
        f"{operation} failed: {error}",
        reason=reason,
        solution=_SOLUTIONS.get(error.code),
    )
    return exit_code_for(error)
