"""
数据映射模块
负责数据库行与领域实体之间的转换
"""

from .base import DataMapper
from .tree_mapper import TreeDataMapper
from .node_mapper import TreeNodeDataMapper

__all__ = [
    'DataMapper',
    'TreeDataMapper',
    'TreeNodeDataMapper'
]
