"""
MCP 工具注册器模块

功能说明:
    集中管理 MCP 工具的注册逻辑。每次工具调用都是一次独立运行，
    使用新的查询引擎（独立的运行内缓存）。

工具分类:
    - 基础工具: verify_environment
    - 提取工具: extract_public_ips
    - 查询工具: lookup_abuse_contact
    - 报告工具: generate_abuse_reports
"""
import json
import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from extraction.ip_extractor import is_private_ip, extract_ips
from extraction.log_index import build_ip_log_map, filter_by_threshold
from log2abuse.config import config
from log2abuse.lookup import AbuseLookupEngine
from log2abuse.pipeline import generate_abuse_reports as run_pipeline
from utils.whois_info import get_whois_info

logger = logging.getLogger(__name__)


class MCPToolRegistry:
    """
    MCP 工具注册器

    功能: 集中管理所有 MCP 工具的注册，按功能分类组织工具
    """

    def __init__(self, mcp: FastMCP):
        self.mcp = mcp

    def register_all(self) -> None:
        """注册所有工具"""
        self.register_basic_tools()
        self.register_extraction_tools()
        self.register_lookup_tools()
        self.register_report_tools()
        logger.info("所有 MCP 工具注册完成")

    def register_basic_tools(self) -> None:
        """注册基础工具"""
        mcp = self.mcp

        @mcp.tool()
        def verify_environment() -> Dict[str, Any]:
            """验证 whois 环境与当前报告配置"""
            return {
                "whois": get_whois_info(),
                "reporter": config.report_options().model_dump(),
                "threshold": config.threshold
            }

    def register_extraction_tools(self) -> None:
        """注册提取工具"""
        mcp = self.mcp

        @mcp.tool()
        def extract_public_ips(log_text: str, threshold: int = 1) -> str:
            """
            从日志文本中提取公网 IP 及其出现次数（不发起 whois 查询）

            Args:
                log_text: 多行日志文本
                threshold: 最小出现次数
            """
            ip_log_map = filter_by_threshold(build_ip_log_map(log_text.splitlines()), max(1, threshold))
            return json.dumps(
                {ip: len(logs) for ip, logs in ip_log_map.items()},
                indent=2,
                ensure_ascii=False
            )

    def register_lookup_tools(self) -> None:
        """注册查询工具"""
        mcp = self.mcp

        @mcp.tool()
        async def lookup_abuse_contact(ip: str) -> str:
            """
            单 IP 滥用联系人查询

            Args:
                ip: IPv4 或 IPv6 地址
            """
            ip = ip.strip()
            if ip not in extract_ips(ip):
                return json.dumps({"status": "error", "message": f"无效的 IP 地址: {ip}"}, ensure_ascii=False)
            if is_private_ip(ip):
                return json.dumps({"status": "error", "message": f"私有/保留地址无需查询: {ip}"}, ensure_ascii=False)

            record = await AbuseLookupEngine().resolve(ip)
            return record.model_dump_json(indent=2)

    def register_report_tools(self) -> None:
        """注册报告工具"""
        mcp = self.mcp

        @mcp.tool()
        async def generate_abuse_reports(
            log_text: str,
            threshold: Optional[int] = None,
            max_logs: Optional[int] = None,
            sender_email: Optional[str] = None,
            sender_name: Optional[str] = None,
            sender_org: Optional[str] = None
        ) -> str:
            """
            [一键式] 日志 -> 提取公网 IP -> whois 查询 -> 按联系人分组 -> 生成滥用报告

            Args:
                log_text: 多行日志文本
                threshold: 最小出现次数，默认取配置
                max_logs: 每个 IP 附带的最大日志行数，默认取配置
                sender_email / sender_name / sender_org: 发件人信息，默认取配置

            Returns:
                str: 运行结果 JSON（报告中的 sender 字段输出为 from）
            """
            if max_logs is not None and max_logs < 0:
                logger.warning(f"max_logs 不能为负数，使用默认值 {config.max_logs_per_ip}")
                max_logs = None

            options = config.report_options(
                sender_email=sender_email,
                sender_name=sender_name,
                sender_org=sender_org,
                max_logs_per_ip=max_logs
            )
            result = await run_pipeline(
                log_text.splitlines(),
                options=options,
                threshold=threshold if threshold is not None else config.threshold
            )
            return result.model_dump_json(indent=2, by_alias=True)


def register_tools(mcp: FastMCP) -> None:
    """注册所有 MCP 工具的便捷函数"""
    registry = MCPToolRegistry(mcp)
    registry.register_all()
