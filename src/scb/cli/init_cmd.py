"""
Init command - install or update the framework in a project.

Handles:
- Template selection (flag, configured default, or interactive prompt)
- Plan display for confirmation and --dry-run
- Gating of re-installs behind --force / --force-core
- Execution and post-install guidance
"""

import logging
from pathlib import Path

import typer
from rich.console import Console

from scb.cli.errors import ExitCode, print_error, print_installer_error
from scb.core.config.loader import load_user_settings
from scb.core.config.models import GitignoreMode, InstallConfig
from scb.core.errors import InstallerError, TemplateNotFoundError
from scb.core.installer.models import InstallationPlan, InstallResult
from scb.core.installer.service import Installer
from scb.core.sources.git import GitSourceProvider
from scb.core.templates.registry import get_template, get_template_ids, list_active_templates

console = Console()
logger = logging.getLogger(__name__)


def select_template(template_flag: str | None, skip_prompt: bool, default_id: str) -> str:
    """
    Resolve the template id to install.

    Raises:
        TemplateNotFoundError: If the chosen id is not registered
    """
    if template_flag:
        get_template(template_flag)
        return template_flag

    if skip_prompt:
        get_template(default_id)
        return default_id

    templates = list_active_templates()
    if len(templates) == 1:
        console.print(f"Using template: {templates[0].display_name} ({templates[0].id})")
        return templates[0].id

    console.print("\n[bold]Available templates:[/bold]")
    for i, template in enumerate(templates, start=1):
        console.print(f"  {i}. {template.display_name} ({template.id})")
        if template.description:
            console.print(f"     [dim]{template.short_description()}[/dim]")

    while True:
        choice = typer.prompt(f"Select template (1-{len(templates)})", type=int)
        if 1 <= choice <= len(templates):
            selected = templates[choice - 1]
            console.print(f"Selected: {selected.display_name} ({selected.id})")
            return selected.id
        console.print(f"[yellow]Please enter a number between 1 and {len(templates)}.[/yellow]")


def _print_section(title: str, items: list[str], marker: str) -> None:
    if not items:
        return
    console.print(f"[bold]{title}[/bold]")
    for item in items:
        console.print(f"  {marker} {item}")
    console.print()


def display_plan(plan: InstallationPlan, *, dry_run: bool = False) -> None:
    """Print what an installation plan will do."""
    if dry_run:
        console.print("[bold cyan]=== DRY RUN MODE ===[/bold cyan]")
        console.print("This shows what would happen without making any changes.\n")

    template = plan.template
    console.print(f"Target directory: {plan.target_dir}")
    console.print(f"Installation type: {plan.installation_type.label}")
    console.print(f"Template: {template.display_name} ({template.id})")
    console.print(f"Branch: {template.branch}")
    console.print(f"Commit: {template.commit}\n")

    verb = "Would" if dry_run else "Will"
    _print_section(f"{verb} create:", plan.will_create, "[green]+[/green]")
    _print_section(f"{verb} replace:", plan.will_replace, "[yellow]~[/yellow]")
    _print_section(f"{verb} preserve:", plan.will_preserve, "[green]✓[/green]")
    _print_section(
        f"{verb} create directories:",
        [f"{d}/" for d in plan.directories_to_create],
        "[green]+[/green]",
    )
    _print_section(f"{verb} create symlinks:", plan.symlinks_to_create, "→")
    _print_section(f"{verb} update symlinks:", plan.symlinks_to_update, "↻")

    if plan.backup_required:
        console.print(f"Backup: {plan.backup_dir}\n")

    _print_section("Warnings:", plan.warnings, "[yellow]![/yellow]")
    _print_section("Errors that prevent installation:", plan.errors, "[red]✗[/red]")


def display_result(result: InstallResult) -> None:
    console.print("[green]✓[/green] Strategic Claude Basic installation completed successfully!")
    if result.backup_dir:
        console.print(f"[dim]Backup created at {result.backup_dir}[/dim]")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print("  1. Open the project in Claude Code")
    console.print("  2. Explore the commands under .claude/commands/strategic")
    console.print("  3. Run the status command any time to verify the installation")


def main(
    ctx: typer.Context,
    directory: str = typer.Argument(
        ".",
        help="Project directory to install into (default: current directory)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Replace the whole framework directory",
    ),
    force_core: bool = typer.Option(
        False,
        "--force-core",
        help="Update only core framework directories, preserving user content",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Answer yes to all prompts",
    ),
    no_backup: bool = typer.Option(
        False,
        "--no-backup",
        help="Skip backing up the existing framework directory",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be done without making changes",
    ),
    template: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help=f"Template to install ({', '.join(get_template_ids())})",
    ),
    gitignore: GitignoreMode | None = typer.Option(
        None,
        "--gitignore",
        help="Ignore-file policy: track, all, or non-user",
        case_sensitive=False,
    ),
) -> None:
    """
    Install the Strategic Claude Basic framework.

    Installation modes:
    - New installation in a clean directory
    - Update core only (--force-core): replace core, guides and templates
    - Full overwrite (--force): replace the whole framework directory

    Examples:
        scb init                       # Install with template selection
        scb init --template ccr -y     # Install the CCR template
        scb init ./my-project          # Install in a specific directory
        scb init --force-core          # Update core files only
        scb init --dry-run             # Preview what would be done
    """
    debug = (ctx.obj or {}).get("debug", False)
    target = Path(directory).expanduser().absolute()
    user_settings = load_user_settings(target)

    try:
        template_id = select_template(template, yes, user_settings.template)
    except TemplateNotFoundError as e:
        print_error(
            f"Invalid template: {e.template_id}",
            solution=f"Use one of: {', '.join(e.available)}",
        )
        raise typer.Exit(ExitCode.VALIDATION_ERROR) from e

    config = InstallConfig(
        target_dir=target,
        template_id=template_id,
        force=force,
        force_core=force_core,
        skip_confirm=yes,
        no_backup=no_backup or user_settings.no_backup,
        dry_run=dry_run,
        verbose=debug,
        gitignore_mode=gitignore or user_settings.gitignore_mode,
        git_timeout=user_settings.git_timeout,
    )
    if debug:
        console.print(f"[dim]Install config: {config}[/dim]")

    try:
        config.validate()
        provider = GitSourceProvider(timeout=config.git_timeout)
        installer = Installer(source_provider=provider)
        plan = installer.analyze(config)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Installation analysis")) from e

    if dry_run:
        display_plan(plan, dry_run=True)
        raise typer.Exit(ExitCode.INSTALLATION_ERROR if plan.errors else ExitCode.SUCCESS)

    try:
        provider.validate_git_installed()
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Installation")) from e

    if not plan.is_valid():
        display_plan(plan)
        print_error("Installation plan has errors")
        raise typer.Exit(ExitCode.INSTALLATION_ERROR)

    if plan.is_installed and not (force or force_core) and yes:
        print_error(
            f"Strategic Claude Basic is already installed in {plan.target_dir}",
            solution="scb init --force-core (update core) or scb init --force (overwrite)",
        )
        raise typer.Exit(ExitCode.ALREADY_INSTALLED)

    if not yes:
        display_plan(plan)
        if not typer.confirm("Proceed with installation?", default=False):
            console.print("Installation cancelled")
            raise typer.Exit(ExitCode.USER_CANCELLED)

    console.print(f"Installing Strategic Claude Basic in {plan.target_dir}...")
    try:
        result = installer.execute(plan, config)
    except InstallerError as e:
        raise typer.Exit(print_installer_error(e, operation="Installation")) from e

    display_result(result)
