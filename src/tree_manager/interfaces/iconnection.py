"""
数据库连接接口
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence


class IDatabaseConnection(ABC):
    """数据库连接接口 - 仓库层只通过它访问数据库"""

    @abstractmethod
    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """
        执行查询

        Args:
            sql: SQL语句（参数使用 ? 占位符）
            params: 参数列表

        Returns:
            结果行列表，每行为 列名 -> 值 的字典
        """
        pass

    @abstractmethod
    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """
        执行写操作

        Returns:
            受影响的行数
        """
        pass

    @abstractmethod
    def last_insert_id(self) -> int:
        """最近一次插入生成的ID"""
        pass

    @abstractmethod
    def begin_transaction(self) -> None:
        """开启事务"""
        pass

    @abstractmethod
    def commit(self) -> None:
        """提交事务"""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """回滚事务"""
        pass

    @abstractmethod
    def in_transaction(self) -> bool:
        """当前是否处于事务中"""
        pass
