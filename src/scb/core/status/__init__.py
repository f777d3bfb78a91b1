"""
Installation status detection.
"""

from scb.core.status.detector import StatusDetector, load_template_info
from scb.core.status.models import InstallationState, SymlinkStatus

__all__ = ["InstallationState", "StatusDetector", "SymlinkStatus", "load_template_info"]
