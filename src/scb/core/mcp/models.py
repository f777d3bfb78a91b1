"""
MCP server template and installation plan models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scb.core.errors import ConfigValidationError


class MCPServer(BaseModel):
    """A stdio MCP server definition as shipped in a template file."""

    command: str = Field(description="Executable to launch")
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] | None = Field(default=None)

    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class MCPTemplate(BaseModel):
    """An installable server found under templates/mcps/."""

    name: str = Field(description="Server name, taken from the file name")
    file_name: str
    server: MCPServer


class MCPConfig(BaseModel):
    """
    A project's .mcp.json.

    Existing servers are kept as raw mappings so entries this tool does not
    model (http servers, extra keys) are written back unchanged.
    """

    mcp_servers: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="mcpServers")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"mcpServers": self.mcp_servers}
        if self.model_extra:
            data.update(self.model_extra)
        return data


class MCPInstallationPlan(BaseModel):
    """What an MCP install will change in the project's .mcp.json."""

    target_dir: str
    templates_dir: str
    config_path: str
    selected: list[MCPTemplate] = Field(default_factory=list)
    has_existing_config: bool = False
    replaces: list[str] = Field(
        default_factory=list, description="Selected servers already present in .mcp.json"
    )

    def validate_plan(self) -> None:
        """
        Raises:
            ConfigValidationError: If the plan cannot be executed
        """
        if not self.target_dir:
            raise ConfigValidationError("target directory is required")
        if not self.selected:
            raise ConfigValidationError("at least one MCP server must be selected")
        if not self.templates_dir:
            raise ConfigValidationError("templates directory is required")


class MCPInstallResult(BaseModel):
    config_path: str
    installed: list[str] = Field(default_factory=list)
    backup_path: str | None = None
