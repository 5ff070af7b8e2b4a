import json

from schemas.lookup import LookupRecord
from schemas.report import AbuseReport, ReportRunSchema, RunStats, SavedFilesSchema
from utils.formatting import build_json_output, build_json_payload, format_report_for_output, format_text_output
from utils.report_files import build_report_filename, get_provider_from_email, save_reports_to_files


def _report(to="abuse@example-hosting.com", ips=None):
    return AbuseReport(
        to=to,
        sender="Abuse Reporter <abuse@example.com>",
        subject="Abuse Report: Malicious activity from 203.0.113.5",
        body="Dear Abuse Team,\n...",
        ips=ips or ["203.0.113.5"],
        generated_at="2026-10-19T12:00:00.000Z"
    )


def _result():
    return ReportRunSchema(
        status="success",
        generated_at="2026-10-19T12:00:00.000Z",
        stats=RunStats(total_log_lines=10, total_ips=3, unique_ips=2, abuse_contacts=1, unknown_ips=1, whois_queries=2),
        reports=[_report()],
        unknown_ips=[LookupRecord(ip="192.0.2.44", raw_whois="inetnum: ...")],
        unresolved_summary="IPs WITHOUT ABUSE CONTACT INFORMATION\n  192.0.2.44"
    )


def test_format_report_for_output():
    """测试单个报告的邮件头格式"""
    text = format_report_for_output(_report(ips=["203.0.113.5", "203.0.113.6"]))

    assert "To: abuse@example-hosting.com" in text
    assert "From: Abuse Reporter <abuse@example.com>" in text
    assert "Date: 2026-10-19T12:00:00.000Z" in text
    assert "IPs: 203.0.113.5, 203.0.113.6" in text
    assert "MESSAGE BODY" in text


def test_format_text_output():
    """测试文本模式汇总"""
    saved = SavedFilesSchema(total=1, providers={"example-hosting.com": 1})
    text = format_text_output(_result(), saved, "emails")

    assert "Total log lines processed: 10" in text
    assert "Unique public IPs found: 2" in text
    assert "Emails saved to: emails/" in text
    assert "Provider directories: example-hosting.com" in text
    assert text.rstrip().endswith("192.0.2.44")


def test_json_payload():
    """测试 JSON 结构: 发件人字段名为 from，原始 whois 不输出"""
    saved = SavedFilesSchema(total=1, providers={"example-hosting.com": 1})
    payload = json.loads(build_json_output(_result(), saved, "emails"))

    assert payload["generated"] == "2026-10-19T12:00:00.000Z"
    assert payload["stats"]["publicIPs"] == 3
    assert payload["stats"]["whoisQueries"] == 2
    assert payload["emails"][0]["from"] == "Abuse Reporter <abuse@example.com>"
    assert "sender" not in payload["emails"][0]
    assert payload["unknownIPs"][0]["ip"] == "192.0.2.44"
    assert "raw_whois" not in payload["unknownIPs"][0]
    assert build_json_payload(_result(), saved, "out")["outputDir"] == "out"


def test_provider_from_email():
    """测试从邮箱提取服务商域名"""
    assert get_provider_from_email("abuse@example-hosting.com") == "example-hosting.com"
    assert get_provider_from_email("not-an-email") == "unknown"
    assert get_provider_from_email("") == "unknown"


def test_report_filename():
    """测试文件名只包含安全字符且最多引用三个地址"""
    report = _report(ips=["203.0.113.5", "2001:db8::1", "203.0.113.7", "203.0.113.8"])
    name = build_report_filename(report)

    assert name == "2026-10-19T12-00-00-000Z_203-0-113-5_2001-db8--1_203-0-113-7.txt"


def test_save_reports_to_files(tmp_path):
    """测试按服务商目录保存报告"""
    reports = [
        _report(to="abuse@a.example", ips=["203.0.113.5"]),
        _report(to="abuse@a.example", ips=["203.0.113.6"]),
        _report(to="noc@b.example", ips=["198.51.100.1"]),
    ]

    saved = save_reports_to_files(reports, tmp_path / "emails")

    assert saved.total == 3
    assert saved.providers == {"a.example": 2, "b.example": 1}
    assert len(saved.files) == 3
    assert len(list((tmp_path / "emails" / "a.example").iterdir())) == 2
    content = (tmp_path / "emails" / "b.example").joinpath(
        "2026-10-19T12-00-00-000Z_198-51-100-1.txt"
    ).read_text(encoding="utf-8")
    assert "To: noc@b.example" in content


def test_save_no_reports(tmp_path):
    """测试没有报告时不创建目录"""
    saved = save_reports_to_files([], tmp_path / "emails")
    assert saved.total == 0
    assert not (tmp_path / "emails").exists()
