"""
log2abuse 异常定义模块

功能说明:
    定义项目中使用的统一异常体系，便于错误捕获与处理。
    查询层抛出的异常在 AbuseLookupEngine 边界被折叠进 LookupRecord.error。
"""
from typing import List, Optional


class Log2AbuseError(Exception):
    """log2abuse 项目基类异常"""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class WhoisNotFoundError(Log2AbuseError):
    """找不到 whois 可执行文件时抛出"""
    pass


class CommandExecutionError(Log2AbuseError):
    """外部命令执行失败（非零退出码）时抛出"""
    def __init__(self, message: str, command: List[str], stderr: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class CommandTimeoutError(Log2AbuseError):
    """外部命令超过时限未完成时抛出"""
    def __init__(self, message: str, command: List[str], timeout: Optional[float]):
        super().__init__(message)
        self.command = command
        self.timeout = timeout
