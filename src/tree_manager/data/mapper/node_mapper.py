"""
树节点数据映射器
"""
import json
from typing import Any, Dict

from ...exceptions import InvalidArgumentError, TypeMismatchError
from ...core.node.entity import TreeNode, create_node
from .base import DataMapper


class TreeNodeDataMapper(DataMapper):
    """
    tree_nodes 表行 <-> 节点实体

    type_class 列决定节点类型，type_data 列是类型数据的JSON字符串
    """

    def map_to_entity(self, data: Dict[str, Any]) -> TreeNode:
        try:
            node_type = data['type_class']
            return create_node(
                node_type,
                node_id=int(data['id']),
                name=data['name'],
                tree_id=int(data['tree_id']),
                parent_id=self._parse_parent_id(data.get('parent_id')),
                sort_order=int(data.get('sort_order') or 0),
                type_data=self._decode_type_data(data.get('type_data'))
            )
        except KeyError as e:
            raise InvalidArgumentError(f"Missing column in node row: {e.args[0]}", argument=e.args[0]) from e

    def map_to_array(self, entity: Any) -> Dict[str, Any]:
        if not isinstance(entity, TreeNode):
            raise TypeMismatchError("TreeNode", entity)

        return {
            'id': entity.id,
            'tree_id': entity.tree_id,
            'parent_id': entity.parent_id,
            'name': entity.name,
            'sort_order': entity.sort_order,
            'type_class': entity.get_type(),
            'type_data': json.dumps(entity.get_type_data(), ensure_ascii=False),
        }

    @staticmethod
    def _parse_parent_id(value: Any):
        # 0 和空值都表示根节点
        if value is None or value == '':
            return None
        return int(value) or None

    @staticmethod
    def _decode_type_data(value: Any) -> Dict[str, Any]:
        if value is None or value == '':
            return {}
        if isinstance(value, dict):
            return value
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid type_data: {value}", argument="type_data", value=value) from e
        if not isinstance(decoded, dict):
            raise InvalidArgumentError(f"type_data must be a JSON object: {value}", argument="type_data", value=value)
        return decoded
