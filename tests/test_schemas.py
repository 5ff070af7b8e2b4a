import pytest
from pydantic import ValidationError

from schemas.address import AddressSchema
from schemas.lookup import LookupRecord, WhoisFields
from schemas.report import AbuseReport, ReportOptions, ReportRunSchema


def test_address_schema():
    """测试地址模型"""
    address = AddressSchema(value="2001:db8::1", family="ipv6")
    assert address.family == "ipv6"

    with pytest.raises(ValidationError):
        AddressSchema(value="203.0.113.5", family="ipv5")


def test_lookup_record_from_whois():
    """测试由解析字段构建成功记录"""
    fields = WhoisFields(abuse_email="abuse@a.example", org_name="A Org", net_range="203.0.113.0/24", country="US")
    record = LookupRecord.from_whois("203.0.113.5", fields, "raw text")

    assert record.abuse_email == "abuse@a.example"
    assert record.raw_whois == "raw text"
    assert record.error is None
    assert not record.failed


def test_lookup_record_from_failure():
    """测试失败记录只包含地址与错误"""
    record = LookupRecord.from_failure("203.0.113.5", "timeout")

    assert record.failed
    assert record.abuse_email is None
    assert record.org_name == "Unknown"
    assert record.net_range is None
    assert record.country is None
    assert record.raw_whois is None


def test_lookup_record_is_frozen():
    """测试记录创建后不可修改"""
    record = LookupRecord(ip="203.0.113.5")
    with pytest.raises(ValidationError):
        record.abuse_email = "abuse@a.example"


def test_lookup_record_excludes_raw_whois():
    """测试序列化时不输出原始 whois 文本"""
    record = LookupRecord(ip="203.0.113.5", raw_whois="very long text")
    assert "raw_whois" not in record.model_dump()


def test_abuse_report_from_alias():
    """测试报告序列化时发件人字段名为 from"""
    report = AbuseReport(
        to="abuse@a.example",
        sender="Abuse Reporter <abuse@example.com>",
        subject="s",
        body="b",
        ips=["203.0.113.5"],
        generated_at="2026-10-19T12:00:00.000Z"
    )

    data = report.model_dump(by_alias=True)
    assert data["from"] == "Abuse Reporter <abuse@example.com>"
    assert "sender" not in data


def test_report_options_validation():
    """测试报告选项校验"""
    assert ReportOptions().max_logs_per_ip == 50
    assert ReportOptions(max_logs_per_ip=0).max_logs_per_ip == 0
    with pytest.raises(ValidationError):
        ReportOptions(max_logs_per_ip=-1)


def test_run_schema_defaults():
    """测试运行结果默认值"""
    result = ReportRunSchema(status="no_input", generated_at="2026-10-19T12:00:00.000Z")
    assert result.reports == []
    assert result.unknown_ips == []
    assert result.unresolved_summary is None
    assert result.stats.total_log_lines == 0
