"""
Tests for MCP server installation.

Covers template discovery, selection, planning and merging into .mcp.json.
"""

import json
from pathlib import Path

import pytest

from conftest import MCP_CONTEXT7, MCP_PLAYWRIGHT, write_mcp_templates
from scb.core.config.constants import FRAMEWORK_DIR, MCP_TEMPLATES_DIR
from scb.core.errors import ConfigValidationError, MCPConfigError, NotFoundError
from scb.core.mcp.service import MCPService

# ==============================================================================
# Discovery and Selection
# ==============================================================================


class TestScanAvailable:
    """Tests for MCPService.scan_available."""

    def test_lists_templates_by_name(self, mcp_project: Path) -> None:
        templates = MCPService().scan_available(mcp_project)

        assert [t.name for t in templates] == ["context7", "playwright"]
        assert templates[0].file_name == "context7.mcp.json"
        assert templates[1].server.env == {"HEADLESS": "1"}

    def test_missing_templates_directory(self, project_dir: Path) -> None:
        with pytest.raises(NotFoundError, match="run 'scb init' first"):
            MCPService().scan_available(project_dir)

    def test_template_with_two_servers(self, mcp_project: Path) -> None:
        mcps = mcp_project / FRAMEWORK_DIR / MCP_TEMPLATES_DIR
        (mcps / "pair.mcp.json").write_text(json.dumps({"a": MCP_CONTEXT7, "b": MCP_CONTEXT7}))

        with pytest.raises(MCPConfigError, match="exactly one server"):
            MCPService().scan_available(mcp_project)

    def test_template_without_command(self, mcp_project: Path) -> None:
        mcps = mcp_project / FRAMEWORK_DIR / MCP_TEMPLATES_DIR
        (mcps / "broken.mcp.json").write_text(json.dumps({"broken": {"args": []}}))

        with pytest.raises(MCPConfigError):
            MCPService().scan_available(mcp_project)


class TestSelect:
    """Tests for MCPService.select."""

    def test_keeps_requested_order(self, mcp_project: Path) -> None:
        service = MCPService()
        available = service.scan_available(mcp_project)

        selected = service.select(available, ["playwright", "context7", "playwright"])

        assert [t.name for t in selected] == ["playwright", "context7"]

    def test_unknown_name(self, mcp_project: Path) -> None:
        service = MCPService()
        with pytest.raises(ConfigValidationError, match="nope"):
            service.select(service.scan_available(mcp_project), ["nope"])


# ==============================================================================
# Planning and Installation
# ==============================================================================


class TestAnalyze:
    """Tests for MCPService.analyze."""

    def test_requires_installation(self, project_dir: Path) -> None:
        with pytest.raises(NotFoundError, match="not installed"):
            MCPService().analyze(project_dir, [])

    def test_requires_selection(self, mcp_project: Path) -> None:
        with pytest.raises(ConfigValidationError, match="at least one"):
            MCPService().analyze(mcp_project, [])

    def test_reports_replaced_servers(self, mcp_project: Path) -> None:
        (mcp_project / ".mcp.json").write_text(json.dumps({"mcpServers": {"context7": {}}}))
        service = MCPService()

        plan = service.analyze(mcp_project, service.scan_available(mcp_project))

        assert plan.has_existing_config is True
        assert plan.replaces == ["context7"]


class TestInstall:
    """Tests for MCPService.install."""

    def test_new_config_starts_from_base_template(self, mcp_project: Path) -> None:
        service = MCPService()
        selected = service.select(service.scan_available(mcp_project), ["context7"])

        result = service.install(service.analyze(mcp_project, selected))

        data = json.loads((mcp_project / ".mcp.json").read_text())
        assert data["mcpServers"] == {
            "memory": {"command": "npx", "args": ["memory-mcp"]},
            "context7": MCP_CONTEXT7,
        }
        assert result.installed == ["context7"]
        assert result.backup_path is None

    def test_no_base_template_starts_empty(self, installed_project: Path) -> None:
        write_mcp_templates(installed_project, with_base=False)
        service = MCPService()
        selected = service.select(service.scan_available(installed_project), ["playwright"])

        service.install(service.analyze(installed_project, selected))

        data = json.loads((installed_project / ".mcp.json").read_text())
        assert data == {"mcpServers": {"playwright": MCP_PLAYWRIGHT}}

    def test_existing_config_is_backed_up_and_kept(self, mcp_project: Path) -> None:
        existing = {
            "mcpServers": {"docs": {"type": "http", "url": "https://example.com/mcp"}},
            "inputs": [{"id": "token"}],
        }
        original = json.dumps(existing)
        (mcp_project / ".mcp.json").write_text(original)
        service = MCPService()
        selected = service.select(service.scan_available(mcp_project), ["context7"])

        result = service.install(service.analyze(mcp_project, selected))

        data = json.loads((mcp_project / ".mcp.json").read_text())
        assert data["mcpServers"]["docs"] == existing["mcpServers"]["docs"]
        assert data["mcpServers"]["context7"] == MCP_CONTEXT7
        assert data["inputs"] == [{"id": "token"}]
        backup = Path(result.backup_path)
        assert backup.name.startswith(".mcp-backup-")
        assert backup.read_text() == original

    def test_invalid_existing_config(self, mcp_project: Path) -> None:
        (mcp_project / ".mcp.json").write_text("{not json")
        service = MCPService()

        with pytest.raises(MCPConfigError):
            service.analyze(mcp_project, service.scan_available(mcp_project))
