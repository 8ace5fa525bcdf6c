"""
树仓库
基于数据库连接实现 trees 表的读写
"""
import logging
from typing import List, Optional

from ...interfaces import IClock, IDatabaseConnection, ITreeRepository
from ...core.time.clock import SystemClock
from ...core.tree.entity import Tree
from ..mapper.tree_mapper import TreeDataMapper
from .base import BaseRepository

logger = logging.getLogger(__name__)


class TreeRepository(BaseRepository, ITreeRepository):
    """
    树仓库

    find_tree_structure 只返回树的元数据，不加载节点；
    组装好的层级结构由 TreeNodeRepository.find_tree_structure 提供
    """

    TABLE = "trees"
    NODE_TABLE = "tree_nodes"
    COLUMNS = "id, name, description, created_at, updated_at, is_active"

    def __init__(
        self,
        connection: IDatabaseConnection,
        mapper: Optional[TreeDataMapper] = None,
        clock: Optional[IClock] = None
    ):
        super().__init__(connection)
        self._clock = clock or SystemClock()
        self._mapper = mapper or TreeDataMapper(self._clock)

    # ========== 查询 ==========

    def find_by_id(self, tree_id: int) -> Optional[Tree]:
        row = self._fetch_one(f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE id = ?", [tree_id])
        return self._mapper.map_to_entity(row) if row else None

    def find_by_name(self, name: str) -> Optional[Tree]:
        row = self._fetch_one(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE name = ? ORDER BY id LIMIT 1",
            [name]
        )
        return self._mapper.map_to_entity(row) if row else None

    def find_all(self) -> List[Tree]:
        rows = self._fetch_all(f"SELECT {self.COLUMNS} FROM {self.TABLE} ORDER BY name, id")
        return self._mapper.map_to_entities(rows)

    def find_active(self) -> List[Tree]:
        rows = self._fetch_all(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE is_active = ? ORDER BY name, id", [1]
        )
        return self._mapper.map_to_entities(rows)

    def find_deleted(self) -> List[Tree]:
        rows = self._fetch_all(
            f"SELECT {self.COLUMNS} FROM {self.TABLE} WHERE is_active = ? ORDER BY name, id", [0]
        )
        return self._mapper.map_to_entities(rows)

    def find_tree_structure(self, tree_id: int) -> Optional[Tree]:
        return self.find_by_id(tree_id)

    # ========== 写入 ==========

    def save(self, tree: Tree) -> Tree:
        """
        保存树

        新树（id为None）插入后把生成的id写回实体；已有的树按id更新，id不在更新列中
        """
        data = self._mapper.map_to_array(tree)
        tree_id = data.pop('id')

        if tree_id is None:
            new_id = self._insert(self.TABLE, data)
            tree.set_id(new_id)
            logger.debug(f"插入树: id={new_id}, name={tree.name}")
        else:
            self._update(self.TABLE, data, 'id', tree_id)
            logger.debug(f"更新树: id={tree_id}")

        return tree

    def delete(self, tree_id: int) -> None:
        """物理删除树及其所有节点"""
        self.delete_by_tree_id(tree_id)
        self._delete_by(self.TABLE, 'id', tree_id)

    def soft_delete(self, tree_id: int) -> None:
        self._set_active(tree_id, False)

    def restore(self, tree_id: int) -> None:
        self._set_active(tree_id, True)

    def delete_by_tree_id(self, tree_id: int) -> None:
        """删除树下的所有节点"""
        self._delete_by(self.NODE_TABLE, 'tree_id', tree_id)

    def _set_active(self, tree_id: int, is_active: bool) -> None:
        self._connection.execute(
            f"UPDATE {self.TABLE} SET is_active = ?, updated_at = ? WHERE id = ?",
            [1 if is_active else 0, self._mapper.format_datetime(self._clock.now()), tree_id]
        )
