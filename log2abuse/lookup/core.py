"""
滥用联系人查询引擎 - whois 查询 + 运行内缓存 + 速率限制
"""

import logging
from typing import Callable, Dict, Iterable, Optional

from analysis.whois_parser import parse_whois
from schemas.lookup import LookupRecord
from .cache import LookupCache
from .limiter import RateLimiter
from .sources import DirectorySource, WhoisSource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


class AbuseLookupEngine:
    """
    滥用联系人查询引擎

    - 每个唯一地址在一次运行中只查询一次，成功与失败结果都会缓存
    - 缓存命中不计入速率限制，也不发起新的查询
    - 查询严格串行，两次查询的发起间隔不小于 min_interval
    - 查询失败不重试，转换为带 error 的记录，从不向调用方抛出
    """

    def __init__(
        self,
        config=None,
        source: Optional[DirectorySource] = None,
        cache: Optional[LookupCache] = None,
        limiter: Optional[RateLimiter] = None
    ):
        """
        初始化查询引擎

        Args:
            config: 配置对象，如果为None则使用默认配置
            source: 目录查询源，默认使用 whois 客户端
            cache: 运行内缓存
            limiter: 速率限制器
        """
        from log2abuse.config import config as default_config

        self.config = config or default_config
        self.source = source or WhoisSource(
            whois_path=self.config.whois_path,
            timeout=self.config.whois_timeout
        )
        self.cache = cache if cache is not None else LookupCache()
        self.limiter = limiter or RateLimiter(min_interval=self.config.whois_min_interval)
        self.query_count = 0

    async def resolve(self, ip: str) -> LookupRecord:
        """
        查询单个 IP 的滥用联系人

        Args:
            ip: 目标 IP 地址

        Returns:
            LookupRecord: 查询记录（失败时 error 字段非空）
        """
        # 1. 检查缓存
        cached = self.cache.get(ip)
        if cached is not None:
            logger.debug(f"使用缓存结果: {ip}")
            return cached

        # 2. 速率限制
        await self.limiter.wait()
        self.query_count += 1

        # 3. 单次查询
        try:
            raw = await self.source.query(ip)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.warning(f"[{self.source.name}] 查询失败: {ip} - {message}")
            record = LookupRecord.from_failure(ip, message)
        else:
            record = LookupRecord.from_whois(ip, parse_whois(raw), raw)
            logger.debug(f"[{self.source.name}] {ip} -> {record.abuse_email or '未找到滥用邮箱'}")

        # 4. 写入缓存
        self.cache.set(ip, record)
        return record

    async def resolve_all(
        self,
        ips: Iterable[str],
        on_progress: Optional[ProgressCallback] = None
    ) -> Dict[str, LookupRecord]:
        """
        按输入顺序逐个查询

        Args:
            ips: IP 地址序列
            on_progress: 进度回调 (ip, 从 1 开始的序号, 总数)，每个地址处理完成后调用

        Returns:
            IP -> LookupRecord 映射（保持输入顺序）
        """
        ips = list(ips)
        total = len(ips)
        results: Dict[str, LookupRecord] = {}

        for index, ip in enumerate(ips, start=1):
            results[ip] = await self.resolve(ip)
            if on_progress:
                self._notify(on_progress, ip, index, total)

        logger.info(f"查询完成: {len(results)} 个地址，发起 whois 查询 {self.query_count} 次")
        return results

    def _notify(self, on_progress: ProgressCallback, ip: str, index: int, total: int) -> None:
        """调用进度回调，回调异常仅记录日志，不中断批量查询"""
        try:
            on_progress(ip, index, total)
        except Exception as e:
            logger.warning(f"进度回调异常: {e}")
