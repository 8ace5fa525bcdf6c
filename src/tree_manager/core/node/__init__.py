"""
节点模块 - 节点实体、工厂、结构构建和渲染
"""

from .entity import TreeNode, SimpleNode, ButtonNode, NODE_TYPES, create_node, node_class_for
from .factory import NodeFactory
from .builder import TreeStructureBuilder
from .renderer import TextTreeRenderer

__all__ = [
    'TreeNode',
    'SimpleNode',
    'ButtonNode',
    'NODE_TYPES',
    'create_node',
    'node_class_for',
    'NodeFactory',
    'TreeStructureBuilder',
    'TextTreeRenderer',
]
