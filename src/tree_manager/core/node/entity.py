"""
树节点实体模块
定义节点的基类和两种具体类型：SimpleNode、ButtonNode
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Type

from ...interfaces import ITreeNodeVisitor
from ...exceptions import UnknownNodeTypeError

DEFAULT_BUTTON_TEXT = "Test Btn"


class TreeNode(ABC):
    """
    树节点基类

    每个节点包含：
    1. 身份信息：id（持久化前为None）、name
    2. 归属关系：tree_id、parent_id（None表示根节点）、sort_order
    3. 类型数据：由具体子类定义，通过 get_type_data() 导出

    身份和业务字段构造后不可修改，需要修改时通过 with_* 方法得到新节点。
    children 只是结构组装时生成的临时视图，不参与持久化。
    """

    node_type: str = ""

    def __init__(
        self,
        node_id: Optional[int],
        name: str,
        tree_id: int,
        parent_id: Optional[int] = None,
        sort_order: int = 0
    ):
        self._id = node_id
        self._name = name
        self._tree_id = tree_id
        self._parent_id = parent_id
        self._sort_order = sort_order
        self._children: List['TreeNode'] = []

    # ========== 只读属性 ==========

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def tree_id(self) -> int:
        return self._tree_id

    @property
    def parent_id(self) -> Optional[int]:
        return self._parent_id

    @property
    def sort_order(self) -> int:
        return self._sort_order

    def is_root(self) -> bool:
        return self._parent_id is None

    # ========== 类型相关 ==========

    def get_type(self) -> str:
        """节点类型标识（持久化的 type_class 列）"""
        return self.node_type

    @abstractmethod
    def get_type_data(self) -> Dict[str, Any]:
        """类型专属数据（持久化的 type_data 列）"""
        pass

    @abstractmethod
    def accept(self, visitor: ITreeNodeVisitor) -> str:
        """双分派：调用访问者中与本类型对应的方法"""
        pass

    # ========== 临时子节点视图 ==========

    def add_child(self, child: 'TreeNode') -> None:
        self._children.append(child)

    def get_children(self) -> List['TreeNode']:
        return list(self._children)

    def has_children(self) -> bool:
        return bool(self._children)

    def _replace_children(self, children: List['TreeNode']) -> None:
        self._children = list(children)

    # ========== 复制 ==========

    def _copy_with(self, **changes) -> 'TreeNode':
        fields = {
            'node_id': self._id,
            'name': self._name,
            'tree_id': self._tree_id,
            'parent_id': self._parent_id,
            'sort_order': self._sort_order,
            'type_data': self.get_type_data(),
        }
        fields.update(changes)
        return create_node(self.node_type, **fields)

    def with_id(self, node_id: int) -> 'TreeNode':
        return self._copy_with(node_id=node_id)

    def with_parent(self, parent_id: Optional[int]) -> 'TreeNode':
        return self._copy_with(parent_id=parent_id)

    def with_sort_order(self, sort_order: int) -> 'TreeNode':
        return self._copy_with(sort_order=sort_order)

    # ========== 序列化 ==========

    def to_dict(self, include_children: bool = False) -> Dict[str, Any]:
        result = {
            'id': self._id,
            'name': self._name,
            'tree_id': self._tree_id,
            'parent_id': self._parent_id,
            'sort_order': self._sort_order,
            'type': self.node_type,
            'type_data': self.get_type_data(),
        }
        if include_children:
            result['children'] = [child.to_dict(include_children=True) for child in self._children]
        return result

    # ========== 特殊方法 ==========

    def _identity(self) -> tuple:
        return (
            self.node_type, self._id, self._name, self._tree_id,
            self._parent_id, self._sort_order,
            tuple(sorted(self.get_type_data().items())),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeNode):
            return False
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return f"{self.node_type}({self._name}, id={self._id}, parent={self._parent_id})"


class SimpleNode(TreeNode):
    """普通节点，没有类型专属数据"""

    node_type = "SimpleNode"

    def __init__(
        self,
        node_id: Optional[int],
        name: str,
        tree_id: int,
        parent_id: Optional[int] = None,
        sort_order: int = 0,
        type_data: Optional[Dict[str, Any]] = None
    ):
        super().__init__(node_id, name, tree_id, parent_id, sort_order)

    def get_type_data(self) -> Dict[str, Any]:
        return {}

    def accept(self, visitor: ITreeNodeVisitor) -> str:
        return visitor.visit_simple_node(self)


class ButtonNode(TreeNode):
    """按钮节点，携带按钮文字和动作"""

    node_type = "ButtonNode"

    def __init__(
        self,
        node_id: Optional[int],
        name: str,
        tree_id: int,
        parent_id: Optional[int] = None,
        sort_order: int = 0,
        type_data: Optional[Dict[str, Any]] = None
    ):
        super().__init__(node_id, name, tree_id, parent_id, sort_order)
        type_data = type_data or {}
        self._button_text = type_data.get('button_text', DEFAULT_BUTTON_TEXT)
        self._button_action = type_data.get('button_action', '')

    @property
    def button_text(self) -> str:
        return self._button_text

    @property
    def button_action(self) -> str:
        return self._button_action

    def get_type_data(self) -> Dict[str, Any]:
        return {
            'button_text': self._button_text,
            'button_action': self._button_action,
        }

    def accept(self, visitor: ITreeNodeVisitor) -> str:
        return visitor.visit_button_node(self)


# 节点类型是封闭集合，新增类型必须在这里登记
NODE_TYPES: Dict[str, Type[TreeNode]] = {
    SimpleNode.node_type: SimpleNode,
    ButtonNode.node_type: ButtonNode,
}


def node_class_for(node_type: str) -> Type[TreeNode]:
    """
    根据类型标识获取节点类

    Raises:
        UnknownNodeTypeError: 未登记的类型
    """
    try:
        return NODE_TYPES[node_type]
    except (KeyError, TypeError):
        raise UnknownNodeTypeError(node_type) from None


def create_node(
    node_type: str,
    node_id: Optional[int],
    name: str,
    tree_id: int,
    parent_id: Optional[int] = None,
    sort_order: int = 0,
    type_data: Optional[Dict[str, Any]] = None
) -> TreeNode:
    """按类型标识构造节点"""
    node_class = node_class_for(node_type)
    return node_class(
        node_id=node_id,
        name=name,
        tree_id=tree_id,
        parent_id=parent_id,
        sort_order=sort_order,
        type_data=type_data
    )
