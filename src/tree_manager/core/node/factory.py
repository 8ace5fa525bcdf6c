"""
节点工厂 - 按类型标识创建节点
"""
from typing import Dict, Any, Optional

from ...exceptions import InvalidArgumentError
from .entity import TreeNode, SimpleNode, ButtonNode, DEFAULT_BUTTON_TEXT, create_node


class NodeFactory:
    """节点工厂，负责从原始数据创建节点以及生成修改后的新节点"""

    default_type = SimpleNode.node_type

    def __init__(self, default_button_text: str = DEFAULT_BUTTON_TEXT):
        self.default_button_text = default_button_text

    def create_from_data(self, node_data: Dict[str, Any], tree_id: int) -> TreeNode:
        """
        从字典创建新节点（id为None）

        Args:
            node_data: 节点数据，必须包含 name；type 缺省为 SimpleNode
            tree_id: 所属树ID

        Raises:
            InvalidArgumentError: 缺少 name
            UnknownNodeTypeError: type 未知
        """
        if 'name' not in node_data or node_data['name'] is None:
            raise InvalidArgumentError("Missing required field: name", argument="name")

        node_type = node_data.get('type') or self.default_type
        type_data = dict(node_data.get('type_data') or {})
        if node_type == ButtonNode.node_type:
            type_data.setdefault('button_text', self.default_button_text)

        return create_node(
            node_type,
            node_id=None,
            name=node_data['name'],
            tree_id=tree_id,
            parent_id=node_data.get('parent_id'),
            sort_order=int(node_data.get('sort_order') or 0),
            type_data=type_data
        )

    def create_with_new_parent(self, node: TreeNode, new_parent_id: Optional[int]) -> TreeNode:
        """生成挂到新父节点下的节点，其余字段（含类型数据）保持不变"""
        return node.with_parent(new_parent_id)

    def create_with_new_sort_order(self, node: TreeNode, new_sort_order: int) -> TreeNode:
        """生成排序号改变后的节点"""
        return node.with_sort_order(new_sort_order)
