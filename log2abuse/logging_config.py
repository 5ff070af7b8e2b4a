"""
日志配置模块

日志一律写入 stderr：CLI 的 stdout 只输出报告文本或 JSON，
stdio 传输模式下 stdout 被 MCP 协议占用。

    from log2abuse.logging_config import setup_logging, get_logger

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
"""
import logging
import sys
from typing import Dict, Optional

CONSOLE_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# whois 查询进度之外的第三方日志只保留 WARNING 及以上
NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "mcp", "asyncio")


class ColoredFormatter(logging.Formatter):
    """按日志级别着色的控制台格式化器（非终端输出时关闭颜色）"""

    GREY = "\x1b[38;21m"
    BLUE = "\x1b[38;5;39m"
    YELLOW = "\x1b[38;5;226m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: BLUE,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def __init__(self, use_colors: bool = True):
        super().__init__(CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT)
        self.use_colors = use_colors
        self._colored: Dict[int, logging.Formatter] = {
            level: logging.Formatter(color + CONSOLE_FORMAT + self.RESET, datefmt=CONSOLE_DATE_FORMAT)
            for level, color in self.LEVEL_COLORS.items()
        }

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors and record.levelno in self._colored:
            return self._colored[record.levelno].format(record)
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    use_colors: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    配置根日志器

    Args:
        level: 日志级别名称，无法识别时使用 INFO
        use_colors: 控制台是否着色，通常传入 sys.stderr.isatty()
        log_file: 额外写入的日志文件（不着色，带模块名）
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        root_logger.addHandler(file_handler)

    silence_library_loggers()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def silence_library_loggers() -> None:
    """将 NOISY_LOGGERS 的级别提升到 WARNING"""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
