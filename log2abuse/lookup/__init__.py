"""
lookup 模块初始化

功能说明:
    滥用联系人查询: whois 查询源、运行内缓存、速率限制与查询引擎。
"""
from .cache import LookupCache
from .core import AbuseLookupEngine
from .limiter import RateLimiter
from .sources import DirectorySource, WhoisSource

__all__ = [
    "AbuseLookupEngine",
    "DirectorySource",
    "LookupCache",
    "RateLimiter",
    "WhoisSource"
]
