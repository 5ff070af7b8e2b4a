"""
whois 环境信息工具模块

功能:
    检查 whois 客户端是否可用，供启动检查与 verify_environment 工具使用。
"""
import os
import shutil
import logging
from typing import Dict, Optional

from log2abuse.config import config

logger = logging.getLogger(__name__)


def resolve_whois_path(whois_path: str = None) -> Optional[str]:
    """
    解析 whois 可执行文件的实际路径

    Args:
        whois_path: whois 可执行文件路径，若为 None 则使用配置默认值

    Returns:
        Optional[str]: 实际路径，找不到时返回 None
    """
    path = whois_path or config.whois_path
    found = shutil.which(path)
    if found:
        return found
    if os.path.isfile(path):
        return path
    return None


def verify_whois(whois_path: str = None) -> bool:
    """
    验证 whois 客户端是否可用

    Args:
        whois_path: whois 可执行文件路径

    Returns:
        bool: 验证是否通过
    """
    path = whois_path or config.whois_path
    resolved = resolve_whois_path(path)
    if not resolved:
        logger.error(f"找不到 whois: {path}")
        return False

    logger.info(f"Found whois: {resolved}")
    return True


def get_whois_info(whois_path: str = None) -> Dict[str, object]:
    """
    汇总 whois 客户端信息

    Returns:
        Dict: 包含 configured_path / resolved_path / available
    """
    path = whois_path or config.whois_path
    resolved = resolve_whois_path(path)
    return {
        "configured_path": path,
        "resolved_path": resolved,
        "available": resolved is not None,
        "timeout": config.whois_timeout,
        "min_interval": config.whois_min_interval
    }
