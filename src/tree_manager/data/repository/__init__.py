"""
仓库模块
基于数据库连接的树/节点仓库，以及树仓库的缓存装饰器
"""

from .base import BaseRepository
from .tree_repository import TreeRepository
from .node_repository import TreeNodeRepository
from .cached_tree_repository import (
    CachedTreeRepository,
    CACHE_TTL,
    ACTIVE_TREES_KEY,
    DELETED_TREES_KEY,
    ALL_TREES_KEY,
    tree_key,
    tree_structure_key,
    tree_name_key
)

__all__ = [
    'BaseRepository',
    'TreeRepository',
    'TreeNodeRepository',
    'CachedTreeRepository',
    'CACHE_TTL',
    'ACTIVE_TREES_KEY',
    'DELETED_TREES_KEY',
    'ALL_TREES_KEY',
    'tree_key',
    'tree_structure_key',
    'tree_name_key'
]
