"""
Template registry and provenance models.
"""

from scb.core.templates.models import Template, TemplateInfo
from scb.core.templates.registry import (
    DEFAULT_TEMPLATE_ID,
    TEMPLATES,
    filter_by_language,
    filter_by_tag,
    get_default_template,
    get_template,
    get_template_ids,
    list_active_templates,
    list_templates,
    validate_template_id,
)

__all__ = [
    "DEFAULT_TEMPLATE_ID",
    "TEMPLATES",
    "Template",
    "TemplateInfo",
    "filter_by_language",
    "filter_by_tag",
    "get_default_template",
    "get_template",
    "get_template_ids",
    "list_active_templates",
    "list_templates",
    "validate_template_id",
]
