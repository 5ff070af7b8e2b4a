"""
分析包: whois 解析、联系人分组与报告生成
"""
