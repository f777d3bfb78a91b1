"""
Clean command - remove the framework from a project.

User-created files under the integration directories are left in place and
listed after the run.
"""

from pathlib import Path

import typer
from rich.console import Console

from scb.cli.errors import ExitCode, print_error, print_installer_error
from scb.core.cleanup.service import CleanupError, CleanupResult, CleanupService
from scb.core.config.constants import FRAMEWORK_DIR
from scb.core.config.models import CleanConfig
from scb.core.errors import InstallerError

console = Console()


def render_result(result: CleanupResult) -> None:
    if result.removed_directory:
        console.print(f"[green]✓[/green] Removed {FRAMEWORK_DIR}/")
    for link in result.removed_symlinks:
        console.print(f"[green]✓[/green] Removed symlink {link}")
    for directory in result.cleaned_directories:
        console.print(f"[green]✓[/green] Removed empty directory {directory}/")

    if result.preserved_files:
        console.print("\n[bold]Preserved:[/bold]")
        for item in result.preserved_files:
            console.print(f"  - {item}")

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in result.errors:
        console.print(f"[red]Error:[/red] {error}")

    console.print(f"\n[dim]{result.summary()}[/dim]")


def main(
    directory: str = typer.Argument(".", help="Project directory to clean"),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation prompt",
    ),
    partial: bool = typer.Option(
        False,
        "--partial",
        help="Clean up after an interrupted install (removes only broken symlinks)",
    ),
) -> None:
    """
    Remove Strategic Claude Basic from a project.

    Removes framework symlinks, the framework directory and framework hooks in
    settings.json. Files you added are preserved.

    Examples:
        scb clean
        scb clean ./my-project --force
        scb clean --partial
    """
    config = CleanConfig(target_dir=Path(directory).expanduser().absolute(), force=force, partial=partial)
    service = CleanupService()

    try:
        config.validate()
        state = service.detector.check_installation(config.target_dir)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Cleanup")) from e

    if not config.partial and service.nothing_installed(state):
        console.print("[yellow]No Strategic Claude Basic installation found[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)

    if not config.force:
        console.print(f"This will remove Strategic Claude Basic from {state.target_dir}")
        if not typer.confirm("Are you sure?", default=False):
            console.print("Cleanup cancelled")
            raise typer.Exit(ExitCode.USER_CANCELLED)

    try:
        if config.partial:
            result = service.handle_partial_installation(config.target_dir)
        else:
            result = service.remove_installation(config.target_dir)
    except CleanupError as e:
        render_result(e.result)
        raise typer.Exit(print_installer_error(e, operation="Cleanup")) from e
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Cleanup")) from e

    render_result(result)
    if not result.success:
        print_error("Cleanup finished with errors")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
