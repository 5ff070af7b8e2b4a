"""
日志提取包: IP 地址提取与日志索引
"""
