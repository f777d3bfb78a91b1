"""
Installation cleanup.

Exports:
    CleanupService: remove an installation or repair a partial one
    CleanupResult: what was removed, preserved and warned about
    CleanupError: fatal cleanup failure carrying the partial result
"""

from scb.core.cleanup.service import (
    NOTHING_INSTALLED_WARNING,
    CleanupError,
    CleanupResult,
    CleanupService,
)

__all__ = ["NOTHING_INSTALLED_WARNING", "CleanupError", "CleanupResult", "CleanupService"]
