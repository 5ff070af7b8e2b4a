#!/usr/bin/env python3
"""
log2abuse MCP 服务器
基于 Model Context Protocol 的滥用报告生成服务

功能说明:
    - 日志公网 IP 提取
    - whois 滥用联系人查询（运行内缓存 + 速率限制）
    - 按联系人归并并生成滥用报告
"""
import argparse
import logging
import os
import signal
import sys
from typing import Optional

import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount, Route

from log2abuse.config import config
from log2abuse.handlers import get_system_info, homepage, print_banner, status_json
from log2abuse.logging_config import get_logger, setup_logging
from log2abuse.tools import register_tools
from utils.whois_info import verify_whois

logger = get_logger(__name__)

# 全局变量存储服务器实例
server_instance: Optional[uvicorn.Server] = None


def create_mcp_server() -> FastMCP:
    """创建 MCP 服务器实例并注册全部工具"""
    mcp = FastMCP("log2abuse MCP")
    register_tools(mcp)
    return mcp


def create_app(mcp: FastMCP) -> Starlette:
    """构建 SSE 模式下的 Starlette 应用"""
    middleware = [
        Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    ]
    routes = [
        Route("/status", homepage),
        Route("/status.json", status_json),
        Mount("/", app=mcp.sse_app())
    ]
    return Starlette(routes=routes, middleware=middleware)


def handle_exit(signum, frame) -> None:
    """处理退出信号"""
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)

    logger.info("正在关闭服务器...")
    if server_instance:
        server_instance.should_exit = True
    else:
        os._exit(0)


def main() -> None:
    global server_instance

    parser = argparse.ArgumentParser(description="log2abuse MCP 服务器")
    parser.add_argument("--host", default=None, help="服务器主机地址")
    parser.add_argument("--port", type=int, default=None, help="服务器端口")
    parser.add_argument("--transport", default="sse", choices=["sse", "stdio"], help="通信传输模式 (sse/stdio)")
    parser.add_argument("--log-level", default="INFO", help="日志级别")
    args = parser.parse_args()

    setup_logging(level=args.log_level, use_colors=sys.stderr.isatty())

    host = args.host or config.server_host
    port = args.port or config.server_port

    if args.transport != "stdio":
        print_banner(get_system_info())

    if not verify_whois():
        logger.warning("whois 不可用，查询将全部失败并归入未解析列表")

    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)

    try:
        mcp = create_mcp_server()

        if args.transport == "stdio":
            mcp.run(transport="stdio")
        else:
            app = create_app(mcp)

            logger.info(f"服务器地址: http://{host}:{port}")
            logger.info(f"状态页面: http://{host}:{port}/status")
            logger.info(f"SSE 端点: http://{host}:{port}/")

            uvicorn_config = uvicorn.Config(app, host=host, port=port, log_level="info")
            server_instance = uvicorn.Server(uvicorn_config)
            server_instance.run()

    except Exception as e:
        logger.error(f"服务器启动失败: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
