"""
核心模块包
包含树、节点、时间等领域实现
"""

from .time import SystemClock, FixedClock
from .tree import Tree
from .node import (
    TreeNode, SimpleNode, ButtonNode,
    NodeFactory, TreeStructureBuilder, TextTreeRenderer
)

__all__ = [
    # 时间模块
    'SystemClock',
    'FixedClock',

    # 树模块
    'Tree',

    # 节点模块
    'TreeNode',
    'SimpleNode',
    'ButtonNode',
    'NodeFactory',
    'TreeStructureBuilder',
    'TextTreeRenderer',
]
