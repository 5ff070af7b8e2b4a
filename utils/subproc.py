"""
子进程管理模块

功能说明:
    封装 asyncio 子进程调用，提供统一的外部命令执行接口，
    包含超时控制、超时后的进程清理与日志记录。
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from utils.errors import CommandTimeoutError

logger = logging.getLogger(__name__)


async def run_command_async(cmd: List[str], timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """
    运行外部命令（异步模式）

    功能: 异步执行命令，避免阻塞事件循环；超时后终止子进程

    参数:
        cmd: 命令及参数列表
        timeout: 超时时间（秒），None 表示不限时

    返回:
        (returncode, stdout, stderr)

    异常:
        CommandTimeoutError: 执行超时
        FileNotFoundError: 可执行文件不存在
        OSError: 其他进程创建错误
    """
    logger.debug(f"异步执行命令: {' '.join(cmd)}")
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            # 进程已自行退出
            pass
        await proc.wait()
        logger.error(f"命令执行超时: {' '.join(cmd)}")
        raise CommandTimeoutError(
            f"命令执行超时 ({timeout}s)",
            command=cmd,
            timeout=timeout
        )

    return (
        proc.returncode or 0,
        stdout.decode('utf-8', errors='replace') if stdout else "",
        stderr.decode('utf-8', errors='replace') if stderr else ""
    )
