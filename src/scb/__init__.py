"""
Strategic Claude Basic - framework installer

A CLI tool that installs, updates, inspects, and removes the Strategic Claude
Basic framework inside a project directory while preserving user content.
"""

__version__ = "0.4.0"

# Re-export core models for convenience
from scb.core.config.models import InstallConfig
from scb.core.status.models import InstallationState, SymlinkStatus

__all__ = ["InstallConfig", "InstallationState", "SymlinkStatus", "__version__"]
