import json
from unittest.mock import MagicMock, patch

import pytest
from starlette.applications import Starlette

from log2abuse.config import config
from log2abuse.handlers import get_system_info, homepage, status_json
from log2abuse.server import create_app, create_mcp_server
from log2abuse.tools.registry import MCPToolRegistry
from schemas.lookup import LookupRecord
from schemas.report import ReportRunSchema


class CapturingMCP:
    """记录注册工具函数的假 MCP 实例"""

    def __init__(self):
        self.tools = {}

    def tool(self):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn
        return decorator


@pytest.fixture
def tools():
    mcp = CapturingMCP()
    MCPToolRegistry(mcp).register_all()
    return mcp.tools


@pytest.mark.asyncio
async def test_server_registers_tools():
    """测试 MCP 服务器注册全部工具"""
    mcp = create_mcp_server()
    names = {tool.name for tool in await mcp.list_tools()}

    assert names == {"verify_environment", "extract_public_ips", "lookup_abuse_contact", "generate_abuse_reports"}


def test_create_app():
    """测试构建 SSE 应用"""
    app = create_app(create_mcp_server())
    assert isinstance(app, Starlette)


def test_extract_public_ips_tool(tools):
    """测试提取工具只返回满足阈值的公网地址"""
    log_text = "a 203.0.113.5\nb 203.0.113.5\nc 198.51.100.1\nd 10.0.0.1"

    assert json.loads(tools["extract_public_ips"](log_text)) == {"203.0.113.5": 2, "198.51.100.1": 1}
    assert json.loads(tools["extract_public_ips"](log_text, threshold=2)) == {"203.0.113.5": 2}


@pytest.mark.asyncio
async def test_lookup_tool_rejects_invalid_and_private(tools):
    """测试查询工具拒绝非法与私有地址"""
    invalid = json.loads(await tools["lookup_abuse_contact"]("not-an-ip"))
    private = json.loads(await tools["lookup_abuse_contact"](" 192.168.1.1 "))

    assert invalid["status"] == "error"
    assert private["status"] == "error"
    assert "192.168.1.1" in private["message"]


@pytest.mark.asyncio
async def test_lookup_tool_resolves_public(tools):
    """测试查询工具返回记录 JSON"""
    record = LookupRecord(ip="203.0.113.5", abuse_email="abuse@a.example")

    async def fake_resolve(self, ip):
        return record

    with patch("log2abuse.tools.registry.AbuseLookupEngine.resolve", fake_resolve):
        data = json.loads(await tools["lookup_abuse_contact"]("203.0.113.5"))

    assert data["abuse_email"] == "abuse@a.example"
    assert "raw_whois" not in data


@pytest.mark.asyncio
async def test_report_tool_without_public_addresses(tools):
    """测试报告工具在没有公网地址时返回 no_data"""
    data = json.loads(await tools["generate_abuse_reports"]("heartbeat 10.0.0.1", threshold=1))

    assert data["status"] == "no_data"
    assert data["reports"] == []


def test_verify_environment_tool(tools):
    """测试环境检查工具"""
    with patch("shutil.which", return_value="/usr/bin/whois"):
        info = tools["verify_environment"]()

    assert info["whois"]["available"] is True
    assert "sender_email" in info["reporter"]


def test_status_handlers():
    """测试状态页面与状态 JSON"""
    with patch("shutil.which", return_value=None), patch("os.path.isfile", return_value=False):
        page = homepage(MagicMock())
        status = status_json(MagicMock())
        system = get_system_info()

    assert "不可用" in page.body.decode("utf-8")
    assert json.loads(status.body)["status"] == "ok"
    assert system["whois_path"] == "未找到"


@pytest.mark.asyncio
async def test_report_tool_negative_max_logs_uses_default(tools):
    """测试报告工具的 max_logs 为负数时使用配置默认值"""
    captured = {}

    async def fake_pipeline(lines, options=None, threshold=1, engine=None, on_progress=None):
        captured["options"] = options
        return ReportRunSchema(status="no_data", generated_at="2026-10-19T12:00:00.000Z")

    with patch("log2abuse.tools.registry.run_pipeline", fake_pipeline):
        data = json.loads(await tools["generate_abuse_reports"]("GET / 203.0.113.5", threshold=1, max_logs=-5))

    assert data["status"] == "no_data"
    assert captured["options"].max_logs_per_ip == config.max_logs_per_ip
