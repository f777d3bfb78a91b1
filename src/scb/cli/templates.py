"""
Templates command - list installable templates.
"""

import typer
from rich.console import Console
from rich.table import Table

from scb.core.templates.registry import (
    DEFAULT_TEMPLATE_ID,
    filter_by_language,
    filter_by_tag,
    list_active_templates,
    list_templates,
)

console = Console()


def main(
    show_all: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Include deprecated templates",
    ),
    tag: str | None = typer.Option(None, "--tag", help="Only templates with this tag"),
    language: str | None = typer.Option(
        None, "--language", help="Only templates for this language (or any language)"
    ),
) -> None:
    """List templates available for installation."""
    templates = list_templates() if show_all else list_active_templates()
    if tag:
        tagged = {t.id for t in filter_by_tag(tag)}
        templates = [t for t in templates if t.id in tagged]
    if language:
        matching = {t.id for t in filter_by_language(language)}
        templates = [t for t in templates if t.id in matching]

    if not templates:
        console.print("[yellow]No templates match[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Commit")
    table.add_column("Tags")
    for template in templates:
        marker = " (default)" if template.id == DEFAULT_TEMPLATE_ID else ""
        table.add_row(
            f"{template.id}{marker}",
            template.display_name,
            template.branch,
            template.commit[:8],
            ", ".join(template.tags),
        )
    console.print(table)
