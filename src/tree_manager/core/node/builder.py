"""
树结构构建器
把扁平的节点列表组装成层级结构（纯内存操作，不访问存储）
"""

import logging
from typing import Dict, List, Optional, Iterable

from .entity import TreeNode

logger = logging.getLogger(__name__)


class TreeStructureBuilder:
    """节点列表 <-> 层级结构 的转换工具"""

    def build_tree_from_nodes(self, nodes: Iterable[TreeNode]) -> List[TreeNode]:
        """
        由扁平节点列表构建树结构

        parent_id为空的节点作为根节点（保持输入顺序）；
        父节点不在本次列表中的节点视为孤儿，直接丢弃，不报错。

        Args:
            nodes: 同一棵树的节点，顺序任意

        Returns:
            根节点列表，子节点已填充
        """
        nodes = list(nodes)
        node_map: Dict[Optional[int], TreeNode] = {}
        for node in nodes:
            node._replace_children([])
            node_map[node.id] = node

        root_nodes = []
        orphans = 0
        for node in nodes:
            if node.parent_id is None:
                root_nodes.append(node)
                continue

            parent = node_map.get(node.parent_id)
            if parent is None:
                orphans += 1
                logger.warning(f"丢弃孤儿节点: id={node.id}, parent_id={node.parent_id}")
                continue
            parent.add_child(node)

        logger.debug(f"结构组装完成: {len(nodes)}个节点, {len(root_nodes)}个根节点, {orphans}个孤儿")
        return root_nodes

    def sort_nodes(self, nodes: List[TreeNode]) -> List[TreeNode]:
        """按 sort_order 升序排列每一层的兄弟节点（递归，稳定排序）"""
        sorted_nodes = sorted(nodes, key=lambda n: n.sort_order)
        for node in sorted_nodes:
            if node.has_children():
                node._replace_children(self.sort_nodes(node.get_children()))
        return sorted_nodes

    def flatten_tree(self, root_nodes: List[TreeNode]) -> List[TreeNode]:
        """先序遍历，把层级结构展开成扁平列表"""
        flat = []
        for node in root_nodes:
            flat.append(node)
            if node.has_children():
                flat.extend(self.flatten_tree(node.get_children()))
        return flat

    def find_node_by_id(self, root_nodes: List[TreeNode], node_id: int) -> Optional[TreeNode]:
        """在层级结构中深度优先查找节点"""
        for node in root_nodes:
            if node.id == node_id:
                return node
            if node.has_children():
                found = self.find_node_by_id(node.get_children(), node_id)
                if found is not None:
                    return found
        return None
