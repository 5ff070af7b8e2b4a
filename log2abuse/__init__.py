"""
log2abuse - 从日志流生成按滥用联系人归并的滥用报告
"""

__version__ = "0.1.0"
