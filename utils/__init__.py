"""
通用工具包: 异常、子进程、格式化、报告落盘
"""
