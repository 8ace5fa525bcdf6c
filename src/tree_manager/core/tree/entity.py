"""
树实体模块
一棵树是一组节点的命名容器，支持软删除/恢复
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta

from ...interfaces import IClock
from ...exceptions import InvalidArgumentError
from ..time.clock import SystemClock

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class Tree:
    """
    树实体

    包含：
    1. 身份信息：id（持久化前为None）、name、description
    2. 生命周期：created_at、updated_at、is_active（软删除标记）

    所有修改方法都会推进 updated_at
    """

    def __init__(
        self,
        tree_id: Optional[int],
        name: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        is_active: bool = True,
        clock: Optional[IClock] = None
    ):
        """
        初始化树

        Args:
            tree_id: 树ID，新建时为None，由仓库保存时分配
            name: 树名称
            description: 描述
            created_at: 创建时间，默认当前时间
            updated_at: 更新时间，默认当前时间
            is_active: 是否有效（False表示已软删除）
            clock: 时钟，默认系统时钟
        """
        self._clock = clock or SystemClock()
        self._id = tree_id
        self._name = name
        self._description = description
        self._created_at = created_at or self._clock.now()
        self._updated_at = updated_at or self._clock.now()
        self._is_active = is_active

    # ========== 只读属性 ==========

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def is_active(self) -> bool:
        return self._is_active

    # ========== 修改方法 ==========

    def set_id(self, tree_id: int) -> None:
        """分配ID（只允许在首次插入时调用）"""
        if self._id is not None and self._id != tree_id:
            raise InvalidArgumentError(
                f"Tree already has ID {self._id}",
                argument="tree_id",
                value=tree_id
            )
        self._id = tree_id

    def set_name(self, name: str) -> None:
        self._name = name
        self._touch()

    def set_description(self, description: Optional[str]) -> None:
        self._description = description
        self._touch()

    def set_active(self, is_active: bool) -> None:
        self._is_active = is_active
        self._touch()

    def soft_delete(self) -> None:
        """标记为已删除，行数据保留"""
        self.set_active(False)

    def restore(self) -> None:
        """恢复软删除"""
        self.set_active(True)

    def _touch(self) -> None:
        # 时钟没有前进时（如固定时钟）也要保证 updated_at 单调递增
        now = self._clock.now()
        if now <= self._updated_at:
            now = self._updated_at + timedelta(seconds=1)
        self._updated_at = now

    # ========== 序列化 ==========

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self._id,
            'name': self._name,
            'description': self._description,
            'createdAt': self._created_at.strftime(DATETIME_FORMAT),
            'updatedAt': self._updated_at.strftime(DATETIME_FORMAT),
            'isActive': self._is_active,
        }

    # ========== 特殊方法 ==========

    def __repr__(self) -> str:
        status = "✓" if self._is_active else "✗"
        return f"Tree({self._name}, id={self._id})[{status}]"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tree):
            return False
        if self._id is None or other._id is None:
            return self is other
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id) if self._id is not None else id(self)
