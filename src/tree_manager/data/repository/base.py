"""
仓库基类
封装常用的参数化SQL操作
"""
from typing import Any, Dict, List, Optional, Sequence

from ...interfaces import IDatabaseConnection


class BaseRepository:
    """
    SQL仓库基类

    表名和列名只能来自子类里写死的常量，所有值都通过 ? 占位符传入
    """

    def __init__(self, connection: IDatabaseConnection):
        self._connection = connection

    @property
    def connection(self) -> IDatabaseConnection:
        return self._connection

    def _fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = self._connection.query(sql, params)
        return rows[0] if rows else None

    def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return self._connection.query(sql, params)

    def _insert(self, table: str, data: Dict[str, Any]) -> int:
        """插入一行，返回生成的ID"""
        columns = ", ".join(data.keys())
        placeholders = ", ".join("?" for _ in data)
        sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        self._connection.execute(sql, list(data.values()))
        return int(self._connection.last_insert_id())

    def _update(self, table: str, data: Dict[str, Any], id_field: str, id_value: Any) -> int:
        """按ID更新一行，返回受影响行数"""
        set_clause = ", ".join(f"{column} = ?" for column in data)
        sql = f"UPDATE {table} SET {set_clause} WHERE {id_field} = ?"
        return self._connection.execute(sql, list(data.values()) + [id_value])

    def _delete_by(self, table: str, field: str, value: Any) -> int:
        sql = f"DELETE FROM {table} WHERE {field} = ?"
        return self._connection.execute(sql, [value])
