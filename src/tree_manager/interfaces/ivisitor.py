"""
节点访问者接口
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.node.entity import SimpleNode, ButtonNode


class ITreeNodeVisitor(ABC):
    """节点访问者 - 每种节点类型对应一个visit方法，返回字符串"""

    @abstractmethod
    def visit_simple_node(self, node: 'SimpleNode') -> str:
        pass

    @abstractmethod
    def visit_button_node(self, node: 'ButtonNode') -> str:
        pass
