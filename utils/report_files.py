"""
报告落盘模块

功能说明:
    将生成的滥用报告按收件人邮箱域名（服务商）分目录写入文本文件。
"""
import logging
import re
from pathlib import Path
from typing import List, Union

from schemas.report import AbuseReport, SavedFilesSchema
from utils.formatting import format_report_for_output

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def get_provider_from_email(email: str) -> str:
    """从邮箱地址中提取服务商域名，无法识别时返回 "unknown" """
    match = re.search(r"@(.+)$", email or "")
    return match.group(1) if match else "unknown"


def build_report_filename(report: AbuseReport) -> str:
    """
    生成报告文件名

    格式: <生成时间>_<前三个 IP>.txt，冒号与点号替换为短横线
    """
    timestamp = re.sub(r"[:.]", "-", report.generated_at)
    ip_suffix = _UNSAFE_CHARS.sub("-", "_".join(report.ips[:3]))
    return f"{timestamp}_{ip_suffix}.txt"


def save_reports_to_files(reports: List[AbuseReport], output_dir: Union[str, Path]) -> SavedFilesSchema:
    """
    保存报告文件

    参数:
        reports: 报告列表
        output_dir: 输出根目录

    返回:
        SavedFilesSchema: 写入文件数、各服务商目录的文件数
    """
    saved = SavedFilesSchema()
    root = Path(output_dir)

    for report in reports:
        provider = get_provider_from_email(report.to)
        provider_dir = root / provider
        provider_dir.mkdir(parents=True, exist_ok=True)

        filepath = provider_dir / build_report_filename(report)
        filepath.write_text(format_report_for_output(report), encoding="utf-8")
        logger.debug(f"已写入报告: {filepath}")

        saved.total += 1
        saved.providers[provider] = saved.providers.get(provider, 0) + 1
        saved.files.append(str(filepath))

    return saved
