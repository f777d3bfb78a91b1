"""
Strategic Claude Basic CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from scb import __version__
from scb.cli import clean, init_cmd, install_mcp, repair, status, templates

# Help panel names for command grouping
PANEL_INSTALL = "Install and Update"
PANEL_INSPECT = "Inspect and Repair"

app = typer.Typer(
    name="scb",
    help="Install and manage the Strategic Claude Basic framework",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Strategic Claude Basic - framework installer.

    Installs the framework into .strategic-claude-basic/, links it into
    .claude/ and .codex/, and merges its hooks into .claude/settings.json
    without touching your own settings or files.

    Quick Start:
        scb init                     # Install into the current directory
        scb status                   # Check the installation
        scb init --force-core        # Update core files, keep your content
        scb clean                    # Remove the framework

    Shell completion:
        scb --install-completion     # Install completion for the current shell
    """
    configure_logging(debug)
    ctx.obj = {"debug": debug}


# =============================================================================
# Install and Update
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_INSTALL)(init_cmd.main)
app.command(name="clean", rich_help_panel=PANEL_INSTALL)(clean.main)
app.command(name="install-mcp", rich_help_panel=PANEL_INSTALL)(install_mcp.main)
app.command(name="templates", rich_help_panel=PANEL_INSTALL)(templates.main)


# =============================================================================
# Inspect and Repair
# =============================================================================

app.command(name="status", rich_help_panel=PANEL_INSPECT)(status.main)
app.command(name="repair", rich_help_panel=PANEL_INSPECT)(repair.main)


@app.command(rich_help_panel=PANEL_INSPECT)
def version() -> None:
    """Show version and exit."""
    console.print(f"strategic-claude-basic-cli version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    cli_main()
