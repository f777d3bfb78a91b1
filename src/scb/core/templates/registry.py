"""
Static registry of installable templates.

All lookups are pure and in-memory; adding a template means adding an entry
to TEMPLATES.
"""

from __future__ import annotations

from scb.core.errors import TemplateNotFoundError
from scb.core.templates.models import Template

DEFAULT_TEMPLATE_ID = "main"
DEFAULT_REPO_URL = "https://github.com/Fomo-Driven-Development/strategic-claude-base.git"

TEMPLATES: dict[str, Template] = {
    "main": Template(
        id="main",
        name="Strategic Claude Basic",
        description=(
            "Main template for general development projects with comprehensive "
            "Claude Code integration"
        ),
        repo_url=DEFAULT_REPO_URL,
        branch="main",
        commit="9080f5291629718f1aa01824750479a263bc2360",
        tags=["general", "default"],
    ),
    "ccr": Template(
        id="ccr",
        name="CCR Template",
        description=(
            "Specialized template for CCR (Claude Code Router) workflows "
            "and development patterns"
        ),
        repo_url=DEFAULT_REPO_URL,
        branch="ccr-template",
        commit="2c9fa88312f7ae68747dd69bbc0075ab47b0225f",
        tags=["ccr", "workflow", "specialized"],
    ),
}


def get_template_ids() -> list[str]:
    return sorted(TEMPLATES)


def get_template(template_id: str) -> Template:
    """
    Look up a template by id.

    Raises:
        TemplateNotFoundError: If the id is not registered
    """
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id, get_template_ids()) from None


def get_default_template() -> Template:
    return get_template(DEFAULT_TEMPLATE_ID)


def validate_template_id(template_id: str) -> None:
    get_template(template_id)


def list_templates() -> list[Template]:
    """All templates, sorted by id."""
    return [TEMPLATES[tid] for tid in get_template_ids()]


def list_active_templates() -> list[Template]:
    """Templates that are not deprecated, sorted by id."""
    return [t for t in list_templates() if not t.deprecated]


def filter_by_language(language: str) -> list[Template]:
    """Templates for `language`, plus language-agnostic ones."""
    return [t for t in list_templates() if not t.language or t.language == language]


def filter_by_tag(tag: str) -> list[Template]:
    return [t for t in list_templates() if t.has_tag(tag)]
