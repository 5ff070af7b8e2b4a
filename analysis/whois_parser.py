"""
whois 输出解析模块

功能说明:
    从自由格式的 whois 文本中提取滥用邮箱、组织名称、网段和国家代码。
    各字段独立提取，任一字段失败不影响其他字段；模式列表的顺序即优先级。
"""
import re
from typing import List, Optional, Pattern

from schemas.lookup import UNKNOWN_ORG, WhoisFields

_EMAIL = r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})"

# 滥用邮箱: 逐行扫描，同一行内按此顺序尝试
ABUSE_EMAIL_PATTERNS: List[Pattern[str]] = [
    re.compile(rf"abuse.*?{_EMAIL}", re.IGNORECASE),
    re.compile(rf"OrgAbuseEmail:\s*{_EMAIL}", re.IGNORECASE),
    re.compile(rf"RAbuseEmail:\s*{_EMAIL}", re.IGNORECASE),
    re.compile(rf"abuse-mailbox:\s*{_EMAIL}", re.IGNORECASE),
    re.compile(rf"% Abuse contact for .* is '{_EMAIL}'", re.IGNORECASE),
]

# 以下字段对整篇文本按优先级依次尝试；值限定在同一行内
ORG_NAME_PATTERNS: List[Pattern[str]] = [
    re.compile(r"OrgName:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"org-name:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"Organization:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"netname:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"descr:[ \t]*(.+)", re.IGNORECASE),
]

NET_RANGE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"NetRange:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"inetnum:[ \t]*(.+)", re.IGNORECASE),
    re.compile(r"CIDR:[ \t]*(.+)", re.IGNORECASE),
]

COUNTRY_PATTERNS: List[Pattern[str]] = [
    re.compile(r"Country:[ \t]*([A-Z]{2})", re.IGNORECASE),
    re.compile(r"country:[ \t]*([A-Z]{2})", re.IGNORECASE),
]


def extract_abuse_email(whois_output: str) -> Optional[str]:
    """
    提取滥用投诉邮箱

    按行从上到下扫描，每行依次尝试 ABUSE_EMAIL_PATTERNS，
    全文第一个命中即返回（小写）。

    Args:
        whois_output: whois 原始输出

    Returns:
        邮箱地址，未找到返回 None
    """
    for line in whois_output.splitlines():
        for pattern in ABUSE_EMAIL_PATTERNS:
            match = pattern.search(line)
            if match and match.group(1):
                return match.group(1).lower()
    return None


def _first_capture(whois_output: str, patterns: List[Pattern[str]]) -> Optional[str]:
    """按优先级返回第一个非空捕获（已去除首尾空白）"""
    for pattern in patterns:
        match = pattern.search(whois_output)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def extract_org_name(whois_output: str) -> str:
    """提取组织名称，未找到返回 "Unknown" """
    return _first_capture(whois_output, ORG_NAME_PATTERNS) or UNKNOWN_ORG


def extract_net_range(whois_output: str) -> Optional[str]:
    """提取网段"""
    return _first_capture(whois_output, NET_RANGE_PATTERNS)


def extract_country(whois_output: str) -> Optional[str]:
    """提取两位国家代码（大写）"""
    code = _first_capture(whois_output, COUNTRY_PATTERNS)
    return code.upper() if code else None


def parse_whois(whois_output: str) -> WhoisFields:
    """解析 whois 输出

    功能: 纯函数，独立提取四个字段
    参数: whois_output: whois 原始文本
    返回: WhoisFields 对象
    """
    text = whois_output or ""
    return WhoisFields(
        abuse_email=extract_abuse_email(text),
        org_name=extract_org_name(text),
        net_range=extract_net_range(text),
        country=extract_country(text)
    )
