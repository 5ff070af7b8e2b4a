"""
tools 模块初始化

功能说明:
    MCP 工具注册模块，提供工具注册器和便捷注册函数。
"""
from .registry import MCPToolRegistry, register_tools

__all__ = [
    "MCPToolRegistry",
    "register_tools"
]
