"""
报告生成流水线

功能说明:
    日志行 -> IP 日志索引 -> 阈值过滤 -> whois 查询 -> 按联系人分组 -> 报告 + 未解析汇总。
    CLI 与 MCP 工具共用此入口；每次调用即一次独立运行（独立的查询缓存）。
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from analysis.composer import compose_all_reports, format_iso, group_sizes, summarize_unresolved
from analysis.grouping import UNRESOLVED_KEY, group_by_abuse_email
from extraction.log_index import build_ip_log_map, filter_by_threshold
from log2abuse.lookup import AbuseLookupEngine
from log2abuse.lookup.core import ProgressCallback
from schemas.report import ReportOptions, ReportRunSchema, RunStats

logger = logging.getLogger(__name__)


async def generate_abuse_reports(
    lines: Iterable[str],
    options: Optional[ReportOptions] = None,
    threshold: int = 1,
    engine: Optional[AbuseLookupEngine] = None,
    on_progress: Optional[ProgressCallback] = None
) -> ReportRunSchema:
    """
    执行一次完整的报告生成

    Args:
        lines: 日志行
        options: 报告选项，缺省使用默认值
        threshold: 地址最小出现次数，小于 1 时按 1 处理
        engine: 查询引擎，缺省新建（即新的运行内缓存）
        on_progress: 查询进度回调

    Returns:
        ReportRunSchema: status 为 no_input / no_data / success
    """
    lines = list(lines)
    threshold = max(1, threshold or 1)
    generated_at = datetime.now(timezone.utc)
    stats = RunStats(total_log_lines=len(lines))

    if not lines:
        return ReportRunSchema(
            status="no_input",
            message="未读取到任何日志行",
            generated_at=format_iso(generated_at),
            threshold=threshold,
            stats=stats
        )

    # 1. 提取 IP 并建立日志索引
    full_index = build_ip_log_map(lines)
    ip_log_map = filter_by_threshold(full_index, threshold)
    stats.total_ips = len(full_index)
    stats.unique_ips = len(ip_log_map)
    logger.info(f"发现 {stats.total_ips} 个公网 IP，其中 {stats.unique_ips} 个出现次数 >= {threshold}")

    if not ip_log_map:
        return ReportRunSchema(
            status="no_data",
            message="日志中未发现满足条件的公网 IP 地址",
            generated_at=format_iso(generated_at),
            threshold=threshold,
            stats=stats
        )

    # 2. 查询滥用联系人
    engine = engine or AbuseLookupEngine()
    records = await engine.resolve_all(ip_log_map.keys(), on_progress)
    stats.whois_queries = engine.query_count

    # 3. 分组并生成报告
    groups = group_by_abuse_email(records)
    logger.debug(f"分组结果: {group_sizes(groups)}")
    reports = compose_all_reports(groups, ip_log_map, options, generated_at)
    unknown = groups.get(UNRESOLVED_KEY, [])

    stats.abuse_contacts = len(reports)
    stats.unknown_ips = len(unknown)
    logger.info(f"归并为 {len(groups)} 个滥用联系人分组，生成报告 {len(reports)} 份")

    return ReportRunSchema(
        status="success",
        generated_at=format_iso(generated_at),
        threshold=threshold,
        stats=stats,
        reports=reports,
        unknown_ips=unknown,
        unresolved_summary=summarize_unresolved(groups)
    )
