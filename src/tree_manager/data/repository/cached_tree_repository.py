"""
带缓存的树仓库
以装饰器方式包装任意 ITreeRepository，读走缓存，写后失效
"""
import copy
import hashlib
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from ...interfaces import ICache, ITreeRepository
from ...core.tree.entity import Tree

logger = logging.getLogger(__name__)

CACHE_TTL = 3600  # 1小时
ACTIVE_TREES_KEY = "trees:active"
DELETED_TREES_KEY = "trees:deleted"
ALL_TREES_KEY = "trees:all"


def tree_key(tree_id: int) -> str:
    return f"tree:{tree_id}"


def tree_structure_key(tree_id: int) -> str:
    return f"tree_structure:{tree_id}"


def tree_name_key(name: str) -> str:
    return "tree_name:" + hashlib.md5(name.encode("utf-8")).hexdigest()


def _detach(value: Any) -> Any:
    """复制 Tree 或 Tree 列表，字段都是不可变值，浅复制即可"""
    if isinstance(value, list):
        return [copy.copy(tree) for tree in value]
    return copy.copy(value)


class CachedTreeRepository(ITreeRepository):
    """
    缓存装饰器（cache-aside）

    读：先查缓存，命中直接返回；未命中时委托给被包装的仓库，并缓存非空结果。
    写：先委托写入，再无条件删除所有可能受影响的键，不做局部更新。
    缓存中保存的是副本，每次读取也返回新副本，调用方修改返回的 Tree 不会影响缓存。
    """

    def __init__(self, repository: ITreeRepository, cache: ICache, ttl: int = CACHE_TTL):
        self._repository = repository
        self._cache = cache
        self._ttl = ttl
        # tree_id -> 曾经缓存过的名称键，改名后旧名称的键也要失效
        self._name_keys: Dict[int, Set[str]] = {}

    @property
    def inner(self) -> ITreeRepository:
        return self._repository

    # ========== 读取 ==========

    def _cached(self, key: str, loader: Callable[[], Any]) -> Any:
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"缓存命中: {key}")
            return _detach(cached)

        logger.debug(f"缓存未命中: {key}")
        value = loader()
        if value is not None:
            self._cache.set(key, _detach(value), self._ttl)
        return value

    def find_by_id(self, tree_id: int) -> Optional[Tree]:
        return self._cached(tree_key(tree_id), lambda: self._repository.find_by_id(tree_id))

    def find_by_name(self, name: str) -> Optional[Tree]:
        key = tree_name_key(name)
        tree = self._cached(key, lambda: self._repository.find_by_name(name))
        if tree is not None and tree.id is not None:
            self._name_keys.setdefault(tree.id, set()).add(key)
        return tree

    def find_all(self) -> List[Tree]:
        return self._cached(ALL_TREES_KEY, self._repository.find_all)

    def find_active(self) -> List[Tree]:
        return self._cached(ACTIVE_TREES_KEY, self._repository.find_active)

    def find_deleted(self) -> List[Tree]:
        return self._cached(DELETED_TREES_KEY, self._repository.find_deleted)

    def find_tree_structure(self, tree_id: int) -> Optional[Tree]:
        return self._cached(tree_structure_key(tree_id), lambda: self._repository.find_tree_structure(tree_id))

    # ========== 写入 ==========

    def save(self, tree: Tree) -> Tree:
        result = self._repository.save(tree)
        self._invalidate(tree.id, tree.name)
        return result

    def delete(self, tree_id: int) -> None:
        self._repository.delete(tree_id)
        self._invalidate(tree_id)

    def soft_delete(self, tree_id: int) -> None:
        self._repository.soft_delete(tree_id)
        self._invalidate(tree_id)

    def restore(self, tree_id: int) -> None:
        self._repository.restore(tree_id)
        self._invalidate(tree_id)

    def delete_by_tree_id(self, tree_id: int) -> None:
        self._repository.delete_by_tree_id(tree_id)
        self._invalidate(tree_id)

    def _invalidate(self, tree_id: Optional[int], name: Optional[str] = None) -> None:
        keys = [ACTIVE_TREES_KEY, DELETED_TREES_KEY, ALL_TREES_KEY]
        if tree_id is not None:
            keys.append(tree_key(tree_id))
            keys.append(tree_structure_key(tree_id))
            keys.extend(self._name_keys.pop(tree_id, ()))
        if name:
            keys.append(tree_name_key(name))

        for key in keys:
            self._cache.delete(key)
        logger.debug(f"缓存失效: {keys}")
