"""
配置模块
"""
from .settings import SystemSettings

__all__ = ['SystemSettings']
