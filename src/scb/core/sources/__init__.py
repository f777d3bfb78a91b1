"""
Collaborators that produce and prepare template content.

Exports:
    SourceProvider: protocol for fetching template trees
    GitSourceProvider: git clone + checkout implementation
    ScriptRunner: runs pre/post-install scripts
"""

from scb.core.sources.git import GitSourceProvider
from scb.core.sources.provider import SourceProvider
from scb.core.sources.scripts import ScriptRunner

__all__ = ["GitSourceProvider", "ScriptRunner", "SourceProvider"]
