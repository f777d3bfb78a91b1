"""
Installation planning and execution.

Exports:
    Installer: analyze/execute/install
    InstallationPlan, InstallationType, InstallResult: plan and result models
    classify_installation: flags + state -> InstallationType
    apply_gitignore_policy: ignore-file templates
    install_codex_config: Codex TOML copy
"""

from scb.core.installer.codex import install_codex_config
from scb.core.installer.gitignore import apply_gitignore_policy, merge_ignore_lines
from scb.core.installer.models import (
    InstallationPlan,
    InstallationType,
    InstallResult,
    classify_installation,
)
from scb.core.installer.service import Installer

__all__ = [
    "InstallResult",
    "InstallationPlan",
    "InstallationType",
    "Installer",
    "apply_gitignore_policy",
    "classify_installation",
    "install_codex_config",
    "merge_ignore_lines",
]
