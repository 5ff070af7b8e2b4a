"""
HTTP 路由处理器模块

功能说明:
    处理 HTTP 路由相关的请求处理函数，包括状态页面和启动横幅。
"""
import platform
from typing import Dict

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse

from utils.whois_info import get_whois_info

STATUS_PAGE = """<!DOCTYPE html>
<html>
<head><title>log2abuse MCP</title></head>
<body>
    <h1>log2abuse MCP 服务器</h1>
    <p style="color: green;">● 服务器运行正常</p>
    <p>whois: {whois_status}</p>
    <ul>
        <li>verify_environment</li>
        <li>extract_public_ips</li>
        <li>lookup_abuse_contact</li>
        <li>generate_abuse_reports</li>
    </ul>
</body>
</html>
"""


def homepage(request: Request) -> HTMLResponse:
    """
    状态页面处理器

    功能: 返回服务器状态页面，展示可用工具列表和 whois 可用性

    Args:
        request: Starlette 请求对象

    Returns:
        HTMLResponse: 状态页面
    """
    whois = get_whois_info()
    whois_status = whois["resolved_path"] if whois["available"] else f"不可用 ({whois['configured_path']})"
    return HTMLResponse(STATUS_PAGE.format(whois_status=whois_status))


def status_json(request: Request) -> JSONResponse:
    """状态信息（JSON）"""
    return JSONResponse({"status": "ok", "system": get_system_info(), "whois": get_whois_info()})


def get_system_info() -> Dict[str, str]:
    """
    获取系统运行环境信息

    Returns:
        包含系统信息的字典:
            - python_version: Python 版本号
            - os_platform: 操作系统平台信息
            - whois_path: whois 实际路径（不可用时为 "未找到"）
    """
    whois = get_whois_info()
    return {
        "python_version": platform.python_version(),
        "os_platform": platform.platform(),
        "whois_path": whois["resolved_path"] or "未找到"
    }


def print_banner(system_info: Dict[str, str]) -> None:
    """
    打印服务器启动横幅

    Args:
        system_info: 系统信息字典，来自 get_system_info()
    """
    banner = f"""
╔══════════════════════════════════════════════════════════════════╗
║                    log2abuse MCP 服务器启动                      ║
╠══════════════════════════════════════════════════════════════════╣
║ 系统信息:                                                        ║
║ • Python: {system_info['python_version']:<52} ║
║ • 操作系统: {system_info['os_platform']:<50} ║
║ • whois: {system_info['whois_path']:<53} ║
╚══════════════════════════════════════════════════════════════════╝
"""
    print(banner)
