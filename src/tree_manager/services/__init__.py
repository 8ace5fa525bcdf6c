"""
服务层
"""
from .tree_service import TreeService

__all__ = ['TreeService']
