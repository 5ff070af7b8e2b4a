"""
地址模型定义模块

功能说明:
    定义从日志行中提取出的 IP 地址字面量模型。
"""
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class AddressSchema(BaseModel):
    """
    IP 地址字面量

    功能: 表示从日志中匹配到的一个 IPv4/IPv6 地址，保持原始文本形式
    """
    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="地址原文")
    family: Literal["ipv4", "ipv6"] = Field(..., description="地址族")
