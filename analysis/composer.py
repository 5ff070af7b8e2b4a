"""
滥用报告生成模块

功能说明:
    将一个联系人分组及其对应日志行转换为结构化的滥用报告（邮件主题、正文、
    收件人、地址列表），并为未找到联系人的地址生成汇总文本。
    报告正文面向外部滥用处理团队，使用英文模板。
"""
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, List, Mapping, Optional

from analysis.grouping import UNRESOLVED_KEY
from schemas.lookup import UNKNOWN_ORG, LookupRecord
from schemas.report import AbuseReport, ReportOptions

RULE_WIDTH = 70
SUMMARY_WIDTH = 78


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_iso(ts: datetime) -> str:
    """ISO 8601 (UTC, 毫秒精度, Z 结尾)"""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_subject(records: List[LookupRecord]) -> str:
    """
    生成邮件主题

    单条记录时引用该地址，否则引用数量与首条记录的组织名称。
    """
    if len(records) == 1:
        return f"Abuse Report: Malicious activity from {records[0].ip}"

    org_name = (records[0].org_name if records else "") or "your network"
    return f"Abuse Report: Malicious activity from {len(records)} IPs in {org_name}"


def generate_body(
    records: List[LookupRecord],
    ip_log_map: Mapping[str, List[str]],
    options: ReportOptions,
    generated_at: datetime
) -> str:
    """
    生成邮件正文

    Args:
        records: 同一联系人下的查询记录
        ip_log_map: IP -> 日志行
        options: 报告选项（落款组织、每 IP 最大日志行数）
        generated_at: 生成时间

    Returns:
        正文文本
    """
    max_logs = options.max_logs_per_ip
    lines: List[str] = []

    lines.append("Dear Abuse Team,")
    lines.append("")
    lines.append("We have detected malicious activity originating from IP address(es) under your administration.")
    lines.append("We kindly request that you investigate this matter and take appropriate action.")
    lines.append("")
    lines.append("=" * RULE_WIDTH)
    lines.append("INCIDENT DETAILS")
    lines.append("=" * RULE_WIDTH)
    lines.append("")
    lines.append(f"Report generated: {format_datetime(generated_at.astimezone(timezone.utc), usegmt=True)}")
    lines.append(f"Number of offending IPs: {len(records)}")
    lines.append("")

    for record in records:
        lines.append("-" * RULE_WIDTH)
        lines.append(f"IP Address: {record.ip}")
        if record.net_range:
            lines.append(f"Network Range: {record.net_range}")
        if record.country:
            lines.append(f"Country: {record.country}")
        if record.org_name and record.org_name != UNKNOWN_ORG:
            lines.append(f"Organization: {record.org_name}")
        lines.append("")

        logs = ip_log_map.get(record.ip, [])
        if logs:
            lines.append("Relevant log entries:")
            lines.append("")
            for log in logs[:max_logs]:
                lines.append(f"  {log}")
            if len(logs) > max_logs:
                lines.append(f"  ... and {len(logs) - max_logs} more entries")
            lines.append("")

    lines.append("=" * RULE_WIDTH)
    lines.append("")
    lines.append("Please take appropriate action to address this issue. If you require")
    lines.append("additional information or log samples, please do not hesitate to contact us.")
    lines.append("")
    lines.append("Thank you for your cooperation in maintaining a safe internet environment.")
    lines.append("")
    lines.append("Best regards,")
    lines.append(options.sender_org)

    return "\n".join(lines)


def compose_report(
    abuse_email: str,
    records: List[LookupRecord],
    ip_log_map: Mapping[str, List[str]],
    options: Optional[ReportOptions] = None,
    generated_at: Optional[datetime] = None
) -> AbuseReport:
    """
    生成单个滥用报告

    Args:
        abuse_email: 收件人（分组键）
        records: 该联系人下的记录
        ip_log_map: IP 日志索引
        options: 报告选项，缺省时使用默认值
        generated_at: 生成时间，缺省为当前 UTC 时间

    Returns:
        AbuseReport 对象
    """
    options = options or ReportOptions()
    generated_at = generated_at or _now()

    return AbuseReport(
        to=abuse_email,
        sender=f"{options.sender_name} <{options.sender_email}>",
        subject=generate_subject(records),
        body=generate_body(records, ip_log_map, options, generated_at),
        ips=[record.ip for record in records],
        generated_at=format_iso(generated_at)
    )


def compose_all_reports(
    groups: Mapping[str, List[LookupRecord]],
    ip_log_map: Mapping[str, List[str]],
    options: Optional[ReportOptions] = None,
    generated_at: Optional[datetime] = None
) -> List[AbuseReport]:
    """为每个已解析联系人生成报告，跳过 UNRESOLVED_KEY，顺序与分组顺序一致"""
    generated_at = generated_at or _now()
    return [
        compose_report(abuse_email, records, ip_log_map, options, generated_at)
        for abuse_email, records in groups.items()
        if abuse_email != UNRESOLVED_KEY
    ]


def summarize_unresolved(groups: Mapping[str, List[LookupRecord]]) -> Optional[str]:
    """
    生成未找到滥用联系人的地址汇总

    Returns:
        汇总文本；未解析分组为空或不存在时返回 None
    """
    unresolved = groups.get(UNRESOLVED_KEY)
    if not unresolved:
        return None

    lines: List[str] = []
    lines.append("=" * SUMMARY_WIDTH)
    lines.append("IPs WITHOUT ABUSE CONTACT INFORMATION")
    lines.append("=" * SUMMARY_WIDTH)
    lines.append("")
    lines.append("The following IPs could not be matched to an abuse contact:")
    lines.append("")

    for record in unresolved:
        lines.append(f"  {record.ip}")
        if record.org_name and record.org_name != UNKNOWN_ORG:
            lines.append(f"    Organization: {record.org_name}")
        if record.error:
            # 地址已在上一行列出，错误文本中不再重复
            lines.append(f"    Error: {record.error.replace(record.ip, '<ip>')}")

    lines.append("")
    lines.append("You may need to manually look up abuse contacts for these IPs.")
    lines.append("")

    return "\n".join(lines)


def group_sizes(groups: Mapping[str, List[LookupRecord]]) -> Dict[str, int]:
    """各分组的记录数（用于日志与统计）"""
    return {key: len(records) for key, records in groups.items()}
