"""
输出格式化工具模块

功能说明:
    将报告与运行结果渲染为终端文本或 JSON 字符串。
"""
import json
from typing import Any, Dict, List

from schemas.report import AbuseReport, ReportRunSchema, SavedFilesSchema

WIDTH = 78


def format_report_for_output(report: AbuseReport) -> str:
    """
    格式化单个报告（用于终端输出与文件落盘）

    功能: 邮件头 + 正文
    参数: report: AbuseReport 对象
    返回: 文本
    """
    lines: List[str] = []
    lines.append("=" * WIDTH)
    lines.append("ABUSE REPORT EMAIL")
    lines.append("=" * WIDTH)
    lines.append("")
    lines.append(f"To: {report.to}")
    lines.append(f"From: {report.sender}")
    lines.append(f"Subject: {report.subject}")
    lines.append(f"Date: {report.generated_at}")
    lines.append(f"IPs: {', '.join(report.ips)}")
    lines.append("")
    lines.append("-" * WIDTH)
    lines.append("MESSAGE BODY")
    lines.append("-" * WIDTH)
    lines.append("")
    lines.append(report.body)
    lines.append("")
    return "\n".join(lines)


def format_text_output(result: ReportRunSchema, saved: SavedFilesSchema, output_dir: str) -> str:
    """格式化完整运行结果（文本模式）"""
    lines: List[str] = []
    lines.append("")
    lines.append("=" * WIDTH)
    lines.append("ABUSE REPORT GENERATION COMPLETE")
    lines.append("=" * WIDTH)
    lines.append("")
    lines.append(f"Total log lines processed: {result.stats.total_log_lines}")
    lines.append(f"Unique public IPs found: {result.stats.unique_ips}")
    lines.append(f"Abuse reports generated: {len(result.reports)}")
    lines.append(f"Emails saved to: {output_dir}/")
    lines.append(f"Provider directories: {', '.join(saved.providers)}")
    lines.append("")

    for report in result.reports:
        lines.append(format_report_for_output(report))

    if result.unresolved_summary:
        lines.append(result.unresolved_summary)

    return "\n".join(lines)


def build_json_payload(result: ReportRunSchema, saved: SavedFilesSchema, output_dir: str) -> Dict[str, Any]:
    """构建 JSON 输出结构"""
    return {
        "generated": result.generated_at,
        "status": result.status,
        "stats": {
            "totalLogLines": result.stats.total_log_lines,
            "publicIPs": result.stats.total_ips,
            "uniqueIPs": result.stats.unique_ips,
            "abuseContacts": result.stats.abuse_contacts,
            "unknownIPs": result.stats.unknown_ips,
            "whoisQueries": result.stats.whois_queries,
            "savedFiles": saved.total,
            "providers": saved.providers,
        },
        "outputDir": output_dir,
        "emails": [report.model_dump(by_alias=True) for report in result.reports],
        "unknownIPs": [record.model_dump() for record in result.unknown_ips],
    }


def build_json_output(result: ReportRunSchema, saved: SavedFilesSchema, output_dir: str) -> str:
    """格式化完整运行结果（JSON 模式）"""
    return json.dumps(build_json_payload(result, saved, output_dir), indent=2, ensure_ascii=False)
