"""
树模块
"""

from .entity import Tree, DATETIME_FORMAT

__all__ = ['Tree', 'DATETIME_FORMAT']
