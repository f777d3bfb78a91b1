"""
Status command - show what is installed in a project.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from scb.cli.errors import ExitCode, print_installer_error
from scb.core.errors import InstallerError
from scb.core.status.detector import StatusDetector
from scb.core.status.models import InstallationState

console = Console()


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


def render_state(state: InstallationState, verbose: bool) -> None:
    if state.is_installed:
        console.print("[green]✓[/green] Strategic Claude Basic is installed")
    else:
        console.print("[yellow]✗[/yellow] Strategic Claude Basic is not installed")
    console.print(f"[dim]Target: {state.target_dir}[/dim]\n")

    if info := state.template_info:
        console.print(f"Template: {info.template.display_name} ({info.template.id})")
        console.print(f"Commit: {info.installed_commit}")
        console.print(f"Installed at: {info.installed_at.isoformat()}")
        if verbose and info.metadata:
            for key, value in sorted(info.metadata.items()):
                console.print(f"  [dim]{key}: {value}[/dim]")
        console.print()

    console.print(f"Framework directory: {_yes_no(state.framework_dir_exists)}")
    for name, present in state.integration_dirs.items():
        console.print(f"{name} directory: {_yes_no(present)}")

    if state.symlinks and (verbose or not state.is_installed or state.issues):
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
        table.add_column("Symlink")
        table.add_column("Valid")
        table.add_column("Target" if verbose else "Detail")
        for status in state.symlinks:
            detail = status.target if verbose else (status.error or "")
            if not status.exists:
                detail = "missing"
            table.add_row(status.qualified_name, _yes_no(status.valid), detail)
        console.print()
        console.print(table)

    if state.issues:
        console.print("\n[bold yellow]Issues:[/bold yellow]")
        for issue in state.issues:
            console.print(f"  - {issue}")


def main(
    directory: str = typer.Argument(".", help="Project directory to inspect"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show per-symlink targets and provenance metadata",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output status as JSON",
    ),
) -> None:
    """
    Show installation status for a project.

    Exits with code 8 when the framework is not installed.

    Examples:
        scb status
        scb status ./my-project --verbose
        scb status --json
    """
    try:
        state = StatusDetector().check_installation(Path(directory))
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Status check")) from e

    if json_output:
        print(state.model_dump_json(indent=2))
    else:
        render_state(state, verbose)

    if not state.is_installed:
        raise typer.Exit(ExitCode.NOT_INSTALLED)
