"""
Install-mcp command - add MCP servers from the framework's templates.

Servers are chosen with --server (repeatable), --all, or an interactive
numbered prompt, then merged into the project's .mcp.json.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from scb.cli.errors import ExitCode, print_error, print_installer_error
from scb.core.config.constants import FRAMEWORK_DIR
from scb.core.errors import InstallerError
from scb.core.mcp.models import MCPInstallationPlan, MCPTemplate
from scb.core.mcp.service import MCPService

console = Console()


def _describe(template: MCPTemplate) -> str:
    return " ".join([template.server.command, *template.server.args])


def _parse_choices(raw: str, count: int) -> list[int] | None:
    choices: list[int] = []
    for part in raw.replace(" ", "").split(","):
        if not part.isdigit() or not 1 <= int(part) <= count:
            return None
        if int(part) not in choices:
            choices.append(int(part))
    return choices or None


def prompt_for_servers(available: list[MCPTemplate]) -> list[MCPTemplate]:
    console.print("\n[bold]Available MCP servers:[/bold]")
    for i, template in enumerate(available, start=1):
        console.print(f"  {i}. {template.name} [dim]({_describe(template)})[/dim]")

    while True:
        raw = typer.prompt("Select servers (comma-separated numbers, e.g. 1,3)")
        choices = _parse_choices(raw, len(available))
        if choices:
            return [available[i - 1] for i in choices]
        console.print(f"[yellow]Please enter numbers between 1 and {len(available)}.[/yellow]")


def display_plan(plan: MCPInstallationPlan) -> None:
    console.print(f"\nTarget directory: {plan.target_dir}")
    if plan.has_existing_config:
        console.print(f"Existing .mcp.json: {plan.config_path} (will be backed up)")
    else:
        console.print("No existing .mcp.json found - a new file will be created")

    console.print(f"\n[bold]MCP servers to install ({len(plan.selected)}):[/bold]")
    for template in plan.selected:
        note = " [yellow](replaces existing entry)[/yellow]" if template.name in plan.replaces else ""
        console.print(f"  • {template.name} ({_describe(template)}){note}")
    console.print()


def main(
    directory: str = typer.Argument(".", help="Project directory"),
    server: list[str] | None = typer.Option(
        None,
        "--server",
        "-s",
        help="MCP server to install (repeatable)",
    ),
    all_servers: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Install every available MCP server",
    ),
    list_only: bool = typer.Option(
        False,
        "--list",
        "-l",
        help="List available MCP servers and exit",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
) -> None:
    """
    Install MCP servers from the framework's templates into .mcp.json.

    Requires an existing installation. An existing .mcp.json is backed up
    before it is modified.

    Examples:
        scb install-mcp
        scb install-mcp --server context7 --yes
        scb install-mcp ./my-project --list
    """
    target = Path(directory).resolve()
    if not (target / FRAMEWORK_DIR).is_dir():
        print_error(
            f"Strategic Claude Basic is not installed in {target}",
            solution="scb init",
        )
        raise typer.Exit(ExitCode.NOT_INSTALLED)

    service = MCPService()
    try:
        available = service.scan_available(target)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="MCP template scan")) from e

    if not available:
        console.print("No MCP servers available for installation.")
        console.print(f"[dim]MCP templates are stored in {FRAMEWORK_DIR}/templates/mcps/[/dim]")
        return

    if list_only:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Command")
        for template in available:
            table.add_row(template.name, _describe(template))
        console.print(table)
        return

    try:
        if all_servers:
            selected = available
        elif server:
            selected = service.select(available, server)
        else:
            selected = prompt_for_servers(available)
        plan = service.analyze(target, selected)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="MCP installation analysis")) from e

    if not yes:
        display_plan(plan)
        console.print("[yellow]This will modify your project's .mcp.json file.[/yellow]")
        if not typer.confirm("Proceed with MCP server installation?", default=False):
            console.print("MCP installation cancelled")
            raise typer.Exit(ExitCode.USER_CANCELLED)

    try:
        result = service.install(plan)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="MCP installation")) from e

    console.print(f"[green]✓[/green] Installed {len(result.installed)} MCP server(s)")
    console.print(f"[dim]Configuration file: {result.config_path}[/dim]")
    if result.backup_path:
        console.print(f"[dim]Backup created: {result.backup_path}[/dim]")
    console.print("Servers are available the next time Claude Code starts in this project.")
