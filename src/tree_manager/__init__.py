"""
树管理系统 - 树与节点的持久化、缓存和事务管理
"""

__version__ = "1.0.0"
__author__ = "zjy"

from .system import TreeSystem
from .config.settings import SystemSettings
from .services import TreeService

__all__ = ['TreeSystem', 'SystemSettings', 'TreeService']
