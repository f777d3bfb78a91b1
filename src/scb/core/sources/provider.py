"""
Source provider protocol.

A source provider materializes a template's content tree at its pinned
revision in a scratch directory the caller owns until it calls cleanup().
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from scb.core.templates.models import Template


@runtime_checkable
class SourceProvider(Protocol):
    """
    Protocol for fetching template content.

    Implementations raise SourceNotFoundError, SourceTransportError or
    RevisionNotFoundError when the content cannot be produced.
    """

    def fetch(self, template: Template) -> Path:
        """
        Fetch the content tree for `template`.

        Returns:
            Path to a scratch directory holding the tree
        """
        ...

    def cleanup(self, path: Path) -> None:
        """Remove a scratch directory previously returned by fetch()."""
        ...
