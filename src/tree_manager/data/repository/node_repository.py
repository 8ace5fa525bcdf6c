"""
树节点仓库
管理 tree_nodes 表的读写，以及整棵树的结构加载
"""
import logging
from typing import List, Optional

from ...interfaces import IClock, IDatabaseConnection, ITreeNodeRepository
from ...core.time.clock import SystemClock
from ...core.tree.entity import DATETIME_FORMAT
from ...core.node.entity import TreeNode
from ...core.node.builder import TreeStructureBuilder
from ..mapper.node_mapper import TreeNodeDataMapper
from .base import BaseRepository

logger = logging.getLogger(__name__)


class TreeNodeRepository(BaseRepository, ITreeNodeRepository):
    """节点仓库"""

    TABLE = "tree_nodes"
    COLUMNS = "id, tree_id, parent_id, name, sort_order, type_class, type_data"

    def __init__(
        self,
        connection: IDatabaseConnection,
        mapper: Optional[TreeNodeDataMapper] = None,
        builder: Optional[TreeStructureBuilder] = None,
        clock: Optional[IClock] = None
    ):
        super().__init__(connection)
        self._mapper = mapper or TreeNodeDataMapper()
        self._builder = builder or TreeStructureBuilder()
        self._clock = clock or SystemClock()

    # ========== 查询 ==========

    def find_by_id(self, node_id: int) -> Optional[TreeNode]:
        row = self._fetch_one(f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE id = ?", [node_id])
        return self._mapper.map_to_entity(row) if row else None

    def find_by_tree_id(self, tree_id: int) -> List[TreeNode]:
        rows = self._fetch_all(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE tree_id = ? ORDER BY sort_order, id",
            [tree_id]
        )
        return self._mapper.map_to_entities(rows)

    def find_children(self, parent_id: int) -> List[TreeNode]:
        rows = self._fetch_all(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE parent_id = ? ORDER BY sort_order, id",
            [parent_id]
        )
        return self._mapper.map_to_entities(rows)

    def find_root_nodes(self, tree_id: int) -> List[TreeNode]:
        rows = self._fetch_all(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} "
            f"WHERE tree_id = ? AND parent_id IS NULL ORDER BY sort_order, id",
            [tree_id]
        )
        return self._mapper.map_to_entities(rows)

    def find_tree_structure(self, tree_id: int) -> List[TreeNode]:
        """
        加载整棵树

        节点按 sort_order 读出，所以每一层的兄弟节点已经有序；
        父节点缺失的孤儿节点不会出现在结果中

        Returns:
            根节点列表，子节点已填充
        """
        nodes = self.find_by_tree_id(tree_id)
        return self._builder.build_tree_from_nodes(nodes)

    def find_previous_sibling(self, node_id: int) -> Optional[TreeNode]:
        node = self.find_by_id(node_id)
        if node is None:
            return None

        row = self._fetch_one(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} "
            f"WHERE tree_id = ? AND parent_id IS ? AND id != ? "
            f"AND (sort_order < ? OR (sort_order = ? AND id < ?)) "
            f"ORDER BY sort_order DESC, id DESC LIMIT 1",
            [node.tree_id, node.parent_id, node.id, node.sort_order, node.sort_order, node.id]
        )
        return self._mapper.map_to_entity(row) if row else None

    def find_next_sibling(self, node_id: int) -> Optional[TreeNode]:
        node = self.find_by_id(node_id)
        if node is None:
            return None

        row = self._fetch_one(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} "
            f"WHERE tree_id = ? AND parent_id IS ? AND id != ? "
            f"AND (sort_order > ? OR (sort_order = ? AND id > ?)) "
            f"ORDER BY sort_order ASC, id ASC LIMIT 1",
            [node.tree_id, node.parent_id, node.id, node.sort_order, node.sort_order, node.id]
        )
        return self._mapper.map_to_entity(row) if row else None

    # ========== 写入 ==========

    def save(self, node: TreeNode) -> TreeNode:
        """
        保存节点

        节点不可变，插入时返回绑定了新id的节点副本，更新时返回原节点
        """
        data = self._mapper.map_to_array(node)
        node_id = data.pop('id')
        now = self._clock.now().strftime(DATETIME_FORMAT)

        if node_id is None:
            data['created_at'] = now
            data['updated_at'] = now
            new_id = self._insert(self.TABLE, data)
            logger.debug(f"插入节点: id={new_id}, tree_id={node.tree_id}, type={node.get_type()}")
            return node.with_id(new_id)

        data['updated_at'] = now
        self._update(self.TABLE, data, 'id', node_id)
        logger.debug(f"更新节点: id={node_id}")
        return node

    def delete(self, node_id: int) -> None:
        self._delete_by(self.TABLE, 'id', node_id)

    def delete_by_tree_id(self, tree_id: int) -> None:
        self._delete_by(self.TABLE, 'tree_id', tree_id)
