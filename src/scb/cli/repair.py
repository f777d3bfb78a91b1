"""
Repair command - recreate broken framework symlinks.
"""

from pathlib import Path

import typer
from rich.console import Console

from scb.cli.errors import ExitCode, print_error, print_installer_error
from scb.core.errors import InstallerError, SymlinkRepairError
from scb.core.status.detector import StatusDetector
from scb.core.symlinks.manager import SymlinkManager

console = Console()


def main(
    directory: str = typer.Argument(".", help="Project directory to repair"),
) -> None:
    """
    Recreate framework symlinks that are missing or point elsewhere.

    Valid symlinks are left untouched.
    """
    try:
        state = StatusDetector().check_installation(Path(directory))
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Repair")) from e

    if not state.framework_dir_exists:
        print_error(
            "Strategic Claude Basic is not installed here",
            solution="scb init",
        )
        raise typer.Exit(ExitCode.NOT_INSTALLED)

    manager = SymlinkManager()
    try:
        manager.ensure_structure(Path(state.target_dir))
        repaired = manager.repair_broken(Path(state.target_dir))
    except SymlinkRepairError as e:
        for name in e.repaired:
            console.print(f"[green]✓[/green] Repaired {name}")
        raise typer.Exit(print_installer_error(e, operation="Repair")) from e
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Repair")) from e

    if not repaired:
        console.print("[green]✓[/green] All symlinks are valid, nothing to repair")
        return
    for name in repaired:
        console.print(f"[green]✓[/green] Repaired {name}")
