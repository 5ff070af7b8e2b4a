"""
报告模型定义模块

功能说明:
    定义滥用报告、报告生成选项以及一次完整运行结果的 Pydantic 模型。
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from schemas.lookup import LookupRecord


class ReportOptions(BaseModel):
    """
    报告生成选项

    功能: 发件人信息与正文中每个 IP 的最大日志行数
    """
    sender_email: str = Field(default="abuse@example.com", description="发件人邮箱")
    sender_name: str = Field(default="Abuse Reporter", description="发件人显示名")
    sender_org: str = Field(default="System Administrator", description="落款组织")
    max_logs_per_ip: int = Field(default=50, ge=0, description="每个 IP 附带的最大日志行数")


class AbuseReport(BaseModel):
    """
    单个滥用报告

    功能: 面向一个滥用联系人的结构化邮件内容
    """
    to: str = Field(..., description="收件人（滥用联系邮箱）")
    sender: str = Field(..., serialization_alias="from", description="发件人 \"Name <email>\"")
    subject: str = Field(..., description="邮件主题")
    body: str = Field(..., description="邮件正文")
    ips: List[str] = Field(default_factory=list, description="报告涵盖的地址")
    generated_at: str = Field(..., description="生成时间 (ISO 8601)")


class RunStats(BaseModel):
    """运行统计

    功能: 汇总一次运行的输入与分组规模
    """
    total_log_lines: int = 0
    total_ips: int = Field(default=0, description="阈值过滤前的公网 IP 数")
    unique_ips: int = Field(default=0, description="阈值过滤后的公网 IP 数")
    abuse_contacts: int = 0
    unknown_ips: int = 0
    whois_queries: int = 0


class ReportRunSchema(BaseModel):
    """
    一次完整运行的结果

    功能: 表示从日志行到报告的完整结果，包含状态、统计和报告列表
    """
    status: str = Field(..., description="运行状态 (success/no_input/no_data)")
    message: Optional[str] = Field(default=None, description="状态说明")
    generated_at: str = Field(..., description="运行时间")
    threshold: int = Field(default=1, description="最小出现次数")
    stats: RunStats = Field(default_factory=RunStats)
    reports: List[AbuseReport] = Field(default_factory=list)
    unknown_ips: List[LookupRecord] = Field(default_factory=list, description="未找到联系人的记录")
    unresolved_summary: Optional[str] = Field(default=None, description="未解析地址汇总文本")


class SavedFilesSchema(BaseModel):
    """报告落盘统计

    功能: 记录写入的文件总数与各服务商目录的文件数
    """
    total: int = 0
    providers: Dict[str, int] = Field(default_factory=dict)
    files: List[str] = Field(default_factory=list)
