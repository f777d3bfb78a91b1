"""
Framework symlink management.

Exports:
    SymlinkManager: create/validate/repair/remove integration symlinks
    SymlinkStatus: validity of a single symlink
    OwnedRemovalResult: outcome of ownership-checked removal
    inspect_symlink: check one symlink against its expected target
"""

from scb.core.symlinks.manager import SymlinkManager, inspect_symlink
from scb.core.symlinks.models import OwnedRemovalResult, SymlinkStatus

__all__ = [
    "OwnedRemovalResult",
    "SymlinkManager",
    "SymlinkStatus",
    "inspect_symlink",
]
