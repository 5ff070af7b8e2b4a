"""
目录查询源模块 - whois 命令行客户端

每个源接收一个 IP，成功时返回自由格式文本，失败时抛出异常；
异常由 AbuseLookupEngine 统一转换为失败记录。
"""

import logging
from abc import ABC, abstractmethod

from utils.errors import CommandExecutionError, WhoisNotFoundError
from utils.subproc import run_command_async

logger = logging.getLogger(__name__)


class DirectorySource(ABC):
    """
    目录查询源基类

    所有查询源都需要继承此类并实现 query 方法
    """

    def __init__(self, name: str):
        """
        初始化查询源

        Args:
            name: 查询源名称
        """
        self.name = name

    @abstractmethod
    async def query(self, ip: str) -> str:
        """
        查询 IP 的注册信息

        Args:
            ip: 目标IP地址

        Returns:
            原始查询文本

        Raises:
            Exception: 超时、执行失败或 I/O 错误
        """
        pass


class WhoisSource(DirectorySource):
    """
    whois 命令行查询源

    调用系统 whois 客户端，每次查询单次尝试、带超时。
    """

    def __init__(self, whois_path: str = "whois", timeout: float = 30.0):
        """
        初始化 whois 查询源

        Args:
            whois_path: whois 可执行文件路径
            timeout: 单次查询超时（秒）
        """
        super().__init__("whois")
        self.whois_path = whois_path
        self.timeout = timeout

    async def query(self, ip: str) -> str:
        """
        执行 whois 查询

        Args:
            ip: 目标IP地址

        Returns:
            whois 标准输出文本

        Raises:
            WhoisNotFoundError: 找不到 whois 可执行文件
            CommandTimeoutError: 查询超时
            CommandExecutionError: 非零退出码
        """
        cmd = [self.whois_path, ip]
        try:
            code, out, err = await run_command_async(cmd, timeout=self.timeout)
        except FileNotFoundError as e:
            raise WhoisNotFoundError(f"找不到 whois 可执行文件: {self.whois_path}", original_error=e)

        if code != 0:
            detail = err.strip() or "无错误输出"
            raise CommandExecutionError(
                f"whois 执行失败 (退出码 {code}): {detail}",
                command=cmd,
                stderr=err,
                returncode=code
            )

        return out
