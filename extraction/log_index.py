"""
日志索引模块

功能说明:
    遍历日志行，建立 公网 IP -> 原始日志行列表 的映射，
    并提供按最小出现次数过滤的辅助函数。
"""
import logging
from typing import Dict, Iterable, List

from extraction.ip_extractor import extract_ips, is_private_ip

logger = logging.getLogger(__name__)


def build_ip_log_map(lines: Iterable[str]) -> Dict[str, List[str]]:
    """
    构建 IP 日志索引

    功能: 对每一行提取地址，公网地址对应的列表追加该行原文；
    首次出现时创建条目，保持插入顺序。同一行对每个不同地址只追加一次，
    重复输入的相同行会被再次追加。

    参数:
        lines: 日志行序列

    返回:
        Dict[str, List[str]]: IP -> 日志行列表
    """
    ip_log_map: Dict[str, List[str]] = {}
    skipped_private = 0

    for line in lines:
        for ip in extract_ips(line):
            if is_private_ip(ip):
                skipped_private += 1
                continue
            ip_log_map.setdefault(ip, []).append(line)

    logger.debug(f"日志索引构建完成: 公网 IP {len(ip_log_map)} 个，跳过私有地址 {skipped_private} 次")
    return ip_log_map


def filter_by_threshold(ip_log_map: Dict[str, List[str]], min_occurrences: int) -> Dict[str, List[str]]:
    """按最小出现次数过滤索引

    功能: 返回新的映射，仅保留日志行数 >= min_occurrences 的地址，原映射不变
    参数: ip_log_map: IP 日志索引; min_occurrences: 最小出现次数
    返回: 过滤后的映射（保持原有顺序）
    """
    return {
        ip: list(logs)
        for ip, logs in ip_log_map.items()
        if len(logs) >= min_occurrences
    }
