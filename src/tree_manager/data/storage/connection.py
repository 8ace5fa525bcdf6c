"""
SQLite数据库连接实现
"""
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ...interfaces import IDatabaseConnection
from ...exceptions import TransactionError
from .exceptions import StorageConnectionError, StorageOperationError
from .schema import SCHEMA_SQL

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class SQLiteConnection(IDatabaseConnection):
    """
    SQLite连接

    连接工作在自动提交模式下，事务只由 begin_transaction/commit/rollback
    显式控制。同一连接上的调用由锁串行化。
    """

    store_type = "sqlite"

    def __init__(self, db_path: str = MEMORY_DB, timeout: float = 30.0):
        """
        初始化SQLite连接

        Args:
            db_path: 数据库文件路径，":memory:" 表示内存数据库
            timeout: 等待数据库锁的秒数
        """
        self.db_path = db_path
        self._lock = threading.RLock()
        self._last_insert_id: Optional[int] = None

        try:
            if db_path != MEMORY_DB:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                db_path,
                timeout=timeout,
                check_same_thread=False,
                isolation_level=None
            )
        except (OSError, sqlite3.Error) as e:
            raise StorageConnectionError(str(e), store_type=self.store_type) from e

        self._conn.row_factory = sqlite3.Row  # 返回字典式行
        logger.debug(f"打开SQLite连接: {db_path}")

    def init_schema(self) -> None:
        """创建表结构（已存在则跳过）"""
        with self._lock:
            try:
                self._conn.executescript(SCHEMA_SQL)
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="init_schema", store_type=self.store_type) from e

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        with self._lock:
            logger.debug(f"SQL查询: {sql} {list(params or [])}")
            try:
                cursor = self._conn.execute(sql, tuple(params or ()))
                return [dict(row) for row in cursor.fetchall()]
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="query", store_type=self.store_type, sql=sql) from e

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        with self._lock:
            logger.debug(f"SQL执行: {sql} {list(params or [])}")
            try:
                cursor = self._conn.execute(sql, tuple(params or ()))
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="execute", store_type=self.store_type, sql=sql) from e
            if cursor.lastrowid:
                self._last_insert_id = cursor.lastrowid
            return cursor.rowcount

    def last_insert_id(self) -> int:
        if self._last_insert_id is None:
            raise StorageOperationError("no row has been inserted", operation="last_insert_id",
                                        store_type=self.store_type)
        return self._last_insert_id

    def begin_transaction(self) -> None:
        with self._lock:
            if self._conn.in_transaction:
                raise TransactionError("Transaction already started")
            try:
                self._conn.execute("BEGIN")
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="begin", store_type=self.store_type) from e

    def commit(self) -> None:
        with self._lock:
            try:
                self._conn.commit()
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="commit", store_type=self.store_type) from e

    def rollback(self) -> None:
        with self._lock:
            try:
                self._conn.rollback()
            except sqlite3.Error as e:
                raise StorageOperationError(str(e), operation="rollback", store_type=self.store_type) from e

    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def close(self) -> None:
        """关闭连接"""
        with self._lock:
            self._conn.close()
            logger.debug(f"关闭SQLite连接: {self.db_path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
