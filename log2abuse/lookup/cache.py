from collections import OrderedDict
from typing import Optional

from schemas.lookup import LookupRecord


class LookupCache:
    """单次运行内的 whois 查询缓存（仅内存，无淘汰、无过期）"""

    def __init__(self):
        self._cache: "OrderedDict[str, LookupRecord]" = OrderedDict()

    def get(self, ip: str) -> Optional[LookupRecord]:
        """获取缓存记录，未命中返回 None"""
        return self._cache.get(ip)

    def set(self, ip: str, record: LookupRecord) -> None:
        """写入记录；同一地址只保留首次写入的记录"""
        self._cache.setdefault(ip, record)

    def clear(self) -> None:
        """清空缓存"""
        self._cache.clear()

    def __contains__(self, ip: object) -> bool:
        return ip in self._cache

    def __len__(self) -> int:
        return len(self._cache)
