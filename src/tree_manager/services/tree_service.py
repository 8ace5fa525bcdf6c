"""
树服务
组合多个仓库的写操作，每个复合操作都在同一个事务内完成
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..interfaces import IClock, ITreeNodeRepository, ITreeRepository
from ..exceptions import (
    InvalidArgumentError,
    NodeNotFoundError,
    TreeIdRequiredError,
    TreeNotFoundError,
)
from ..core.time.clock import SystemClock
from ..core.tree.entity import Tree
from ..core.node.entity import TreeNode
from ..core.node.factory import NodeFactory
from ..data.storage.unit_of_work import DatabaseUnitOfWork

logger = logging.getLogger(__name__)


class TreeService:
    """
    树服务

    写操作发生在 unit_of_work.transaction() 内：正常结束提交，
    任何异常先回滚再原样抛出，服务本身不做异常转换
    """

    def __init__(
        self,
        tree_repository: ITreeRepository,
        node_repository: ITreeNodeRepository,
        unit_of_work: DatabaseUnitOfWork,
        node_factory: Optional[NodeFactory] = None,
        clock: Optional[IClock] = None
    ):
        self._tree_repository = tree_repository
        self._node_repository = node_repository
        self._unit_of_work = unit_of_work
        self._node_factory = node_factory or NodeFactory()
        self._clock = clock or SystemClock()

    # ========== 树 ==========

    def create_tree_with_nodes(
        self,
        name: str,
        description: Optional[str],
        node_specs: Iterable[Dict[str, Any]]
    ) -> Tree:
        """
        创建树及其初始节点

        每个节点的树ID取节点数据中的 tree_id，缺省时使用新建树的ID

        Args:
            name: 树名称
            description: 描述
            node_specs: 节点数据列表，格式见 NodeFactory.create_from_data

        Returns:
            已保存的树

        Raises:
            TreeIdRequiredError: 节点既没有指定 tree_id，新建树也没有ID
            UnknownNodeTypeError: 节点类型未知
        """
        with self._unit_of_work.transaction() as uow:
            tree = Tree(None, name, description, clock=self._clock)
            self._tree_repository.save(tree)
            uow.register_new(tree)

            for node_data in node_specs or []:
                node = self._save_new_node(node_data, tree)
                uow.register_new(node)

        logger.info(f"创建树: id={tree.id}, name={tree.name}")
        return tree

    def import_tree(
        self,
        name: str,
        description: Optional[str],
        node_specs: List[Dict[str, Any]]
    ) -> Tree:
        """
        导入树

        与 create_tree_with_nodes 相同，但节点通过 parent_ref 引用
        同一批数据中父节点的下标，保存时解析为生成的节点ID

        Raises:
            InvalidArgumentError: parent_ref 没有指向之前的节点
        """
        with self._unit_of_work.transaction() as uow:
            tree = Tree(None, name, description, clock=self._clock)
            self._tree_repository.save(tree)
            uow.register_new(tree)

            saved_ids: List[Optional[int]] = []
            for index, node_data in enumerate(node_specs):
                node_data = dict(node_data)
                parent_ref = node_data.pop('parent_ref', None)
                if parent_ref is not None:
                    if not 0 <= parent_ref < index:
                        raise InvalidArgumentError(
                            f"Invalid parent reference {parent_ref} for node {index}",
                            argument="parent_ref",
                            value=parent_ref
                        )
                    node_data['parent_id'] = saved_ids[parent_ref]

                node = self._save_new_node(node_data, tree)
                uow.register_new(node)
                saved_ids.append(node.id)

        logger.info(f"导入树: id={tree.id}, name={tree.name}, 节点数={len(node_specs)}")
        return tree

    def delete_tree_with_nodes(self, tree_id: int) -> None:
        """删除树的全部节点，再删除树本身"""
        with self._unit_of_work.transaction():
            self._node_repository.delete_by_tree_id(tree_id)
            self._tree_repository.delete(tree_id)

        logger.info(f"删除树: id={tree_id}")

    def get_tree_structure(self, tree_id: int) -> List[TreeNode]:
        """
        获取树的层级结构

        Returns:
            根节点列表，子节点已填充

        Raises:
            TreeNotFoundError: 树不存在
        """
        self._require_tree(tree_id)
        return self._node_repository.find_tree_structure(tree_id)

    def soft_delete_tree(self, tree_id: int) -> None:
        with self._unit_of_work.transaction():
            self._require_tree(tree_id)
            self._tree_repository.soft_delete(tree_id)

        logger.info(f"软删除树: id={tree_id}")

    def restore_tree(self, tree_id: int) -> None:
        with self._unit_of_work.transaction():
            self._require_tree(tree_id)
            self._tree_repository.restore(tree_id)

        logger.info(f"恢复树: id={tree_id}")

    def list_active_trees(self) -> List[Tree]:
        return self._tree_repository.find_active()

    def list_deleted_trees(self) -> List[Tree]:
        return self._tree_repository.find_deleted()

    # ========== 节点 ==========

    def move_node(self, node_id: int, new_parent_id: Optional[int]) -> TreeNode:
        """
        移动节点到新的父节点下，其余字段（含类型数据）不变

        Raises:
            NodeNotFoundError: 节点或新的父节点不存在
            InvalidArgumentError: 新的父节点是节点自身、其后代或属于另一棵树
        """
        with self._unit_of_work.transaction() as uow:
            node = self._require_node(node_id)
            if new_parent_id is not None:
                self._check_new_parent(node, new_parent_id)
            moved =self._node_factory.create_with_new_parent(node, new_parent_id)
            saved = self._node_repository.save(moved)
            uow.register_dirty(saved)

        logger.info(f"移动节点: id={node_id}, parent {node.parent_id} -> {new_parent_id}")
        return saved

    def delete_node_with_descendants(self, node_id: int) -> int:
        """
        删除节点及其所有后代

        Returns:
            删除的节点数

        Raises:
            NodeNotFoundError: 节点不存在
        """
        with self._unit_of_work.transaction() as uow:
            node = self._require_node(node_id)

            # 先收集整棵子树，再自底向上删除
            collected = [node]
            pending = [node]
            while pending:
                current = pending.pop()
                children = self._node_repository.find_children(current.id)
                collected.extend(children)
                pending.extend(children)

            for item in reversed(collected):
                self._node_repository.delete(item.id)
                uow.register_deleted(item)

        logger.info(f"删除节点: id={node_id}, 共 {len(collected)} 个")
        return len(collected)

    def sort_node_left(self, node_id: int) -> None:
        """与前一个兄弟节点交换排序号，已经是第一个时不做修改"""
        self._swap_with_sibling(node_id, self._node_repository.find_previous_sibling)

    def sort_node_right(self, node_id: int) -> None:
        """与后一个兄弟节点交换排序号，已经是最后一个时不做修改"""
        self._swap_with_sibling(node_id, self._node_repository.find_next_sibling)

    def update_node_sort_order(self, node_id: int, sort_order: int) -> TreeNode:
        with self._unit_of_work.transaction() as uow:
            node = self._require_node(node_id)
            updated = self._node_repository.save(
                self._node_factory.create_with_new_sort_order(node, sort_order)
            )
            uow.register_dirty(updated)
        return updated

    def bulk_update_sort_orders(self, updates: Iterable[Dict[str, Any]]) -> None:
        """
        批量更新排序号，任意一个节点不存在时全部回滚

        Args:
            updates: [{"node_id": 1, "sort_order": 0}, ...]
        """
        count = 0
        with self._unit_of_work.transaction() as uow:
            for update in updates:
                try:
                    node_id = update['node_id']
                    sort_order = int(update['sort_order'])
                except (KeyError, TypeError, ValueError) as e:
                    raise InvalidArgumentError(
                        f"Invalid sort update: {update}", argument="updates", value=update
                    ) from e

                node = self._require_node(node_id)
                updated = self._node_repository.save(
                    self._node_factory.create_with_new_sort_order(node, sort_order)
                )
                uow.register_dirty(updated)
                count += 1

        logger.info(f"批量更新排序: {count} 个节点")

    # ========== 内部方法 ==========

    def _save_new_node(self, node_data: Dict[str, Any], tree: Tree) -> TreeNode:
        tree_id = node_data.get('tree_id') or tree.id
        if tree_id is None:
            raise TreeIdRequiredError()

        node = self._node_factory.create_from_data(node_data, tree_id)
        return self._node_repository.save(node)

    def _swap_with_sibling(self, node_id: int, find_sibling) -> None:
        with self._unit_of_work.transaction() as uow:
            node = self._require_node(node_id)
            sibling = find_sibling(node_id)
            if sibling is None:
                uow.rollback()
                return

            uow.register_dirty(self._node_repository.save(
                self._node_factory.create_with_new_sort_order(node, sibling.sort_order)
            ))
            uow.register_dirty(self._node_repository.save(
                self._node_factory.create_with_new_sort_order(sibling, node.sort_order)
            ))

        logger.info(f"交换排序: 节点 {node_id} <-> 节点 {sibling.id}")

    def _require_tree(self, tree_id: int) -> Tree:
        tree = self._tree_repository.find_by_id(tree_id)
        if tree is None:
            raise TreeNotFoundError(tree_id)
        return tree

    def _require_node(self, node_id: int) -> TreeNode:
        node = self._node_repository.find_by_id(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _check_new_parent(self, node: TreeNode, new_parent_id: int) -> None:
        """新的父节点必须存在、位于同一棵树且不在节点自己的子树中"""
        if new_parent_id == node.id:
            raise InvalidArgumentError(
                f"Node {node.id} cannot be its own parent",
                argument="new_parent_id", value=new_parent_id
            )

        parent = self._require_node(new_parent_id)
        if parent.tree_id != node.tree_id:
            raise InvalidArgumentError(
                f"Node {new_parent_id} belongs to tree {parent.tree_id}, not {node.tree_id}",
                argument="new_parent_id", value=new_parent_id
            )

        # 沿父链向上，遇到节点自身说明目标在它的子树中
        seen = {parent.id}
        ancestor_id = parent.parent_id
        while ancestor_id is not None and ancestor_id not in seen:
            if ancestor_id == node.id:
                raise InvalidArgumentError(
                    f"Node {new_parent_id} is a descendant of node {node.id}",
                    argument="new_parent_id", value=new_parent_id
                )
            seen.add(ancestor_id)
            ancestor = self._node_repository.find_by_id(ancestor_id)
            if ancestor is None:
                break
            ancestor_id = ancestor.parent_id
