"""
查询速率限制模块

whois 服务对频繁查询较敏感，两次查询的发起时间至少间隔 min_interval 秒。
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    最小间隔速率限制器

    以上一次查询的"发起"时间（而非完成时间）为基准计算间隔。
    时钟与 sleep 函数可替换，便于测试。
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Args:
            min_interval: 两次查询之间的最小间隔（秒）
            clock: 单调时钟
            sleep: 异步等待函数
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_issued: Optional[float] = None

    @property
    def last_issued(self) -> Optional[float]:
        """上一次查询的发起时间，尚未查询时为 None"""
        return self._last_issued

    async def wait(self) -> float:
        """
        等待到允许发起下一次查询，并记录本次发起时间

        Returns:
            实际等待的秒数
        """
        waited = 0.0
        if self._last_issued is not None:
            elapsed = self._clock() - self._last_issued
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                logger.debug(f"速率限制: 等待 {waited:.3f}s")
                await self._sleep(waited)

        self._last_issued = self._clock()
        return waited
