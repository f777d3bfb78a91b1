"""
MCP server installation.

Installed frameworks ship MCP server templates under
.strategic-claude-basic/templates/mcps/, one `<name>.mcp.json` per server
holding a single `{"<name>": {...}}` entry. Selected servers are merged into
the project's .mcp.json, which is backed up first. A project without a
.mcp.json starts from the framework's `template.mcp.json`.

Usage:
    >>> service = MCPService()
    >>> available = service.scan_available(Path("/path/to/project"))
    >>> plan = service.analyze(Path("/path/to/project"), available[:1])
    >>> service.install(plan)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from scb.core.config.constants import (
    FRAMEWORK_DIR,
    MCP_BACKUP_PREFIX,
    MCP_BASE_TEMPLATE,
    MCP_CONFIG_FILE,
    MCP_TEMPLATE_SUFFIX,
    MCP_TEMPLATES_DIR,
)
from scb.core.errors import ConfigValidationError, MCPConfigError, NotFoundError, filesystem_error
from scb.core.filesystem import backup_file, write_json_atomic
from scb.core.mcp.models import (
    MCPConfig,
    MCPInstallationPlan,
    MCPInstallResult,
    MCPServer,
    MCPTemplate,
)

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        with path.open() as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MCPConfigError(f"invalid JSON in {path}", cause=e, context={"path": str(path)}) from e
    except OSError as e:
        raise filesystem_error("read", path, e) from e


class MCPService:
    """Finds MCP server templates and merges them into .mcp.json."""

    @staticmethod
    def templates_dir(target_dir: Path) -> Path:
        return target_dir / FRAMEWORK_DIR / MCP_TEMPLATES_DIR

    @staticmethod
    def config_path(target_dir: Path) -> Path:
        return target_dir / MCP_CONFIG_FILE

    def scan_available(self, target_dir: Path) -> list[MCPTemplate]:
        """
        List installable servers, sorted by name.

        Raises:
            NotFoundError: If the framework has no MCP templates directory
            MCPConfigError: If a template file is malformed
        """
        templates_dir = self.templates_dir(target_dir)
        if not templates_dir.is_dir():
            raise NotFoundError(
                "MCP templates directory not found - run 'scb init' first",
                context={"operation": "scan MCP templates", "path": str(templates_dir)},
            )

        templates = [
            self.read_template(path)
            for path in templates_dir.rglob(f"*{MCP_TEMPLATE_SUFFIX}")
            if path.is_file() and path.name != MCP_BASE_TEMPLATE
        ]
        templates.sort(key=lambda t: t.name)
        logger.debug(f"Found {len(templates)} MCP templates in {templates_dir}")
        return templates

    @staticmethod
    def read_template(path: Path) -> MCPTemplate:
        """
        Parse one `<name>.mcp.json` template.

        Raises:
            MCPConfigError: Unless the file holds exactly one valid server
        """
        data = _read_json(path)
        if not isinstance(data, dict) or len(data) != 1:
            raise MCPConfigError(
                f"MCP template {path.name} must contain exactly one server",
                context={"path": str(path)},
            )
        (server_data,) = data.values()
        try:
            server = MCPServer.model_validate(server_data)
        except ValidationError as e:
            raise MCPConfigError(
                f"invalid MCP server in {path.name}", cause=e, context={"path": str(path)}
            ) from e
        name = path.name.removesuffix(MCP_TEMPLATE_SUFFIX)
        return MCPTemplate(name=name, file_name=path.name, server=server)

    @staticmethod
    def select(available: list[MCPTemplate], names: list[str]) -> list[MCPTemplate]:
        """
        Pick templates by name, keeping the order given.

        Raises:
            ConfigValidationError: If a name is not available
        """
        by_name = {t.name: t for t in available}
        unknown = [n for n in names if n not in by_name]
        if unknown:
            raise ConfigValidationError(
                f"unknown MCP server(s): {', '.join(unknown)}",
                context={"available": sorted(by_name)},
            )
        selected: list[MCPTemplate] = []
        for name in names:
            if by_name[name] not in selected:
                selected.append(by_name[name])
        return selected

    def load_config(self, path: Path) -> MCPConfig:
        """
        Raises:
            MCPConfigError: If the file is not an MCP configuration object
        """
        data = _read_json(path)
        if not isinstance(data, dict):
            raise MCPConfigError(f"{path} is not a JSON object", context={"path": str(path)})
        try:
            return MCPConfig.model_validate(data)
        except ValidationError as e:
            raise MCPConfigError(
                f"unexpected MCP configuration structure in {path}",
                cause=e,
                context={"path": str(path)},
            ) from e

    def analyze(self, target_dir: Path, selected: list[MCPTemplate]) -> MCPInstallationPlan:
        """
        Work out what installing `selected` will change.

        Raises:
            NotFoundError: If the framework is not installed in target_dir
            ConfigValidationError: If nothing is selected
        """
        target = target_dir.resolve()
        if not (target / FRAMEWORK_DIR).is_dir():
            raise NotFoundError(
                "Strategic Claude Basic not installed - run 'scb init' first",
                context={"operation": "install MCP servers", "path": str(target)},
            )

        config_path = self.config_path(target)
        plan = MCPInstallationPlan(
            target_dir=str(target),
            templates_dir=str(self.templates_dir(target)),
            config_path=str(config_path),
            selected=selected,
            has_existing_config=config_path.exists(),
        )
        if plan.has_existing_config:
            existing = self.load_config(config_path)
            plan.replaces = [t.name for t in selected if t.name in existing.mcp_servers]
        plan.validate_plan()
        return plan

    def install(self, plan: MCPInstallationPlan) -> MCPInstallResult:
        """
        Back up .mcp.json and merge the selected servers into it.

        Raises:
            ConfigValidationError: If the plan is invalid
            MCPConfigError: If an existing or base configuration is malformed
        """
        plan.validate_plan()
        config_path = Path(plan.config_path)
        result = MCPInstallResult(config_path=plan.config_path)

        if plan.has_existing_config:
            result.backup_path = str(backup_file(config_path, MCP_BACKUP_PREFIX, ".json"))
            config = self.load_config(config_path)
        else:
            config = self._base_config(Path(plan.templates_dir))

        for template in plan.selected:
            config.mcp_servers[template.name] = template.server.to_dict()
            result.installed.append(template.name)

        write_json_atomic(config_path, config.to_dict())
        logger.info(f"Installed MCP servers {result.installed} into {config_path}")
        return result

    def _base_config(self, templates_dir: Path) -> MCPConfig:
        base = templates_dir / MCP_BASE_TEMPLATE
        if not base.is_file():
            logger.debug(f"No {MCP_BASE_TEMPLATE} in {templates_dir}, starting empty")
            return MCPConfig()
        return self.load_config(base)
