"""
仓库接口定义
"""
from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.tree.entity import Tree
    from ..core.node.entity import TreeNode


class ITreeRepository(ABC):
    """树仓库接口"""

    @abstractmethod
    def find_by_id(self, tree_id: int) -> Optional['Tree']:
        """根据ID查找树"""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional['Tree']:
        """根据名称查找树"""
        pass

    @abstractmethod
    def find_all(self) -> List['Tree']:
        """查找所有树（按名称排序）"""
        pass

    @abstractmethod
    def find_active(self) -> List['Tree']:
        """查找所有未删除的树"""
        pass

    @abstractmethod
    def find_deleted(self) -> List['Tree']:
        """查找所有已软删除的树"""
        pass

    @abstractmethod
    def save(self, tree: 'Tree') -> 'Tree':
        """
        保存树

        id为None时插入，并把生成的id写回实体；否则按id更新
        """
        pass

    @abstractmethod
    def delete(self, tree_id: int) -> None:
        """物理删除树"""
        pass

    @abstractmethod
    def soft_delete(self, tree_id: int) -> None:
        """软删除树"""
        pass

    @abstractmethod
    def restore(self, tree_id: int) -> None:
        """恢复软删除的树"""
        pass

    @abstractmethod
    def delete_by_tree_id(self, tree_id: int) -> None:
        """删除树下的所有节点"""
        pass

    @abstractmethod
    def find_tree_structure(self, tree_id: int) -> Optional['Tree']:
        """
        加载树的元数据

        只返回树本身，不组装节点；完整层级由节点仓库的
        find_tree_structure 负责
        """
        pass


class ITreeNodeRepository(ABC):
    """树节点仓库接口"""

    @abstractmethod
    def find_by_id(self, node_id: int) -> Optional['TreeNode']:
        """根据ID查找节点"""
        pass

    @abstractmethod
    def find_by_tree_id(self, tree_id: int) -> List['TreeNode']:
        """查找树下所有节点（按排序号升序）"""
        pass

    @abstractmethod
    def find_children(self, parent_id: int) -> List['TreeNode']:
        """查找直接子节点"""
        pass

    @abstractmethod
    def find_root_nodes(self, tree_id: int) -> List['TreeNode']:
        """查找根节点（parent_id为空）"""
        pass

    @abstractmethod
    def find_tree_structure(self, tree_id: int) -> List['TreeNode']:
        """加载整棵树，返回填充好子节点的根节点列表"""
        pass

    @abstractmethod
    def find_previous_sibling(self, node_id: int) -> Optional['TreeNode']:
        """前一个兄弟节点（同父节点，排序号更小中最大的）"""
        pass

    @abstractmethod
    def find_next_sibling(self, node_id: int) -> Optional['TreeNode']:
        """后一个兄弟节点（同父节点，排序号更大中最小的）"""
        pass

    @abstractmethod
    def save(self, node: 'TreeNode') -> 'TreeNode':
        """保存节点，返回持久化后的节点值"""
        pass

    @abstractmethod
    def delete(self, node_id: int) -> None:
        """删除节点"""
        pass

    @abstractmethod
    def delete_by_tree_id(self, tree_id: int) -> None:
        """删除树下所有节点"""
        pass
