"""
数据模块
包含存储、缓存、映射、仓库等数据访问功能
"""
