"""
IP 地址提取模块

功能说明:
    基于正则从任意文本行中匹配 IPv4/IPv6 字面量，并按固定规则表
    判断地址是否为私有/保留地址。仅做字符匹配，不做 DNS 解析。
"""
import re
from typing import List, Literal

from schemas.address import AddressSchema

# IPv4 单段: 0-255，允许前导零
_IPV4_SEG = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV4_ADDR = rf"(?:{_IPV4_SEG}\.){{3}}{_IPV4_SEG}"
_H = r"[0-9a-fA-F]{1,4}"

IPV4_REGEX = re.compile(rf"\b{_IPV4_ADDR}\b")

# 候选形式按从长到短排列；前后断言保证不会截取更长 token 的一部分
IPV6_REGEX = re.compile(
    r"(?<![\w:])(?:"
    rf"(?:{_H}:){{7}}{_H}"
    rf"|(?:{_H}:){{6}}{_IPV4_ADDR}"
    rf"|(?:{_H}:){{1,5}}:(?:{_H}:){{0,4}}{_IPV4_ADDR}"
    rf"|::(?:{_H}:){{0,5}}{_IPV4_ADDR}"
    rf"|(?:{_H}:){{1,7}}:"
    rf"|(?:{_H}:){{1,6}}:{_H}"
    rf"|(?:{_H}:){{1,5}}(?::{_H}){{1,2}}"
    rf"|(?:{_H}:){{1,4}}(?::{_H}){{1,3}}"
    rf"|(?:{_H}:){{1,3}}(?::{_H}){{1,4}}"
    rf"|(?:{_H}:){{1,2}}(?::{_H}){{1,5}}"
    rf"|{_H}:(?::{_H}){{1,6}}"
    rf"|:(?::{_H}){{1,7}}"
    r")(?!\w|:[0-9a-fA-F]|\.\d)"
)

# 私有/保留地址规则表
PRIVATE_IPV4_RULES = [
    re.compile(r"^10\."),                                      # 10.0.0.0/8
    re.compile(r"^172\.(?:1[6-9]|2[0-9]|3[0-1])\."),           # 172.16.0.0/12
    re.compile(r"^192\.168\."),                                # 192.168.0.0/16
    re.compile(r"^127\."),                                     # 127.0.0.0/8 回环
    re.compile(r"^169\.254\."),                                # 169.254.0.0/16 链路本地
    re.compile(r"^0\."),                                       # 0.0.0.0/8
    re.compile(r"^100\.(?:6[4-9]|[7-9][0-9]|1[01][0-9]|12[0-7])\."),  # 100.64.0.0/10 CGNAT
]

PRIVATE_IPV6_RULES = [
    re.compile(r"^::1$"),                                      # 回环
    re.compile(r"^(?:0{1,4}:){7}0{0,3}1$"),                    # 回环（完整写法）
    re.compile(r"^fe[89ab][0-9a-f]:", re.IGNORECASE),          # fe80::/10 链路本地
    re.compile(r"^f[cd][0-9a-f]{2}:", re.IGNORECASE),          # fc00::/7 唯一本地
]


def _unique(matches: List[str]) -> List[str]:
    """按首次出现顺序去重"""
    return list(dict.fromkeys(matches))


def extract_addresses(line: str) -> List[AddressSchema]:
    """提取一行文本中的全部地址

    功能: 先返回 IPv4，再返回 IPv6，各自按首次出现顺序；同一行内重复的地址只保留一次
    参数: line: 日志行
    返回: AddressSchema 列表，无匹配时为空列表
    """
    ipv4 = _unique(IPV4_REGEX.findall(line))
    ipv6 = _unique(IPV6_REGEX.findall(line))
    return (
        [AddressSchema(value=ip, family="ipv4") for ip in ipv4]
        + [AddressSchema(value=ip, family="ipv6") for ip in ipv6]
    )


def extract_ips(line: str) -> List[str]:
    """提取一行文本中的地址字符串"""
    return [addr.value for addr in extract_addresses(line)]


def is_private_ip(ip: str) -> bool:
    """
    判断地址是否为私有/本地地址（此类地址不进入滥用报告）

    Args:
        ip: IPv4 或 IPv6 地址字符串

    Returns:
        bool: 命中规则表任意一条即为 True
    """
    rules = PRIVATE_IPV6_RULES if ":" in ip else PRIVATE_IPV4_RULES
    return any(rule.search(ip) for rule in rules)


def classify(ip: str) -> Literal["private", "public"]:
    """地址分类: private / public"""
    return "private" if is_private_ip(ip) else "public"
