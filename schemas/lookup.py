"""
查询结果模型定义模块

功能说明:
    定义 whois 解析字段与单个 IP 的查询记录模型。
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_ORG = "Unknown"


class WhoisFields(BaseModel):
    """whois 文本解析结果

    功能: 表示从自由格式 whois 输出中提取的四个字段
    参数: 无
    返回: 解析字段对象
    """
    abuse_email: Optional[str] = Field(default=None, description="滥用投诉邮箱（小写）")
    org_name: str = Field(default=UNKNOWN_ORG, description="组织/网络名称")
    net_range: Optional[str] = Field(default=None, description="网段")
    country: Optional[str] = Field(default=None, description="两位国家代码（大写）")


class LookupRecord(BaseModel):
    """
    单 IP 查询记录

    功能: 一次运行中每个唯一地址对应且仅对应一条记录，创建后不可变。
    成功时保留 raw_whois，失败时填充 error，其余可选字段为空。
    """
    model_config = ConfigDict(frozen=True)

    ip: str = Field(..., description="查询的 IP 地址")
    abuse_email: Optional[str] = Field(default=None, description="滥用投诉邮箱")
    org_name: str = Field(default=UNKNOWN_ORG, description="组织名称")
    net_range: Optional[str] = Field(default=None, description="网段")
    country: Optional[str] = Field(default=None, description="国家代码")
    raw_whois: Optional[str] = Field(default=None, exclude=True, description="whois 原始输出（仅成功时）")
    error: Optional[str] = Field(default=None, description="失败原因（仅失败时）")

    @classmethod
    def from_whois(cls, ip: str, fields: WhoisFields, raw_whois: str) -> "LookupRecord":
        """由解析结果构建成功记录"""
        return cls(
            ip=ip,
            abuse_email=fields.abuse_email,
            org_name=fields.org_name,
            net_range=fields.net_range,
            country=fields.country,
            raw_whois=raw_whois
        )

    @classmethod
    def from_failure(cls, ip: str, error: str) -> "LookupRecord":
        """构建失败记录"""
        return cls(ip=ip, error=error)

    @property
    def failed(self) -> bool:
        return self.error is not None
