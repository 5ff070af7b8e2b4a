"""
数据模型定义包
"""
