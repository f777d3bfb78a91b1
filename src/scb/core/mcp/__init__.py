"""
MCP server installation into a project's .mcp.json.

Exports:
    MCPService: scan, select, plan and install MCP server templates
"""

from scb.core.mcp.models import (
    MCPConfig,
    MCPInstallationPlan,
    MCPInstallResult,
    MCPServer,
    MCPTemplate,
)
from scb.core.mcp.service import MCPService

__all__ = [
    "MCPConfig",
    "MCPInstallResult",
    "MCPInstallationPlan",
    "MCPServer",
    "MCPService",
    "MCPTemplate",
]
