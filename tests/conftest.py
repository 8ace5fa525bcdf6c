"""
pytest配置文件
用于设置测试环境和共享fixtures
"""
import sys
import os
from datetime import datetime

import pytest

# 将src目录添加到Python路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tree_manager.interfaces import IDatabaseConnection
from tree_manager.core.time import FixedClock
from tree_manager.data.storage import SQLiteConnection, StorageOperationError


class RecordingConnection(IDatabaseConnection):
    """
    记录调用的连接桩

    calls 按顺序记录 begin/commit/rollback/execute/query；
    fail_on 中列出的方法被调用时抛出 StorageOperationError
    """

    def __init__(self, rows=None):
        self.calls = []
        self.statements = []
        self.fail_on = set()
        self.rows = rows or []
        self._next_id = 0
        self._in_transaction = False

    def _record(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise StorageOperationError("simulated failure", operation=name, store_type="stub")

    def query(self, sql, params=None):
        self._record("query")
        self.statements.append((sql, list(params or [])))
        return list(self.rows)

    def execute(self, sql, params=None):
        self._record("execute")
        self.statements.append((sql, list(params or [])))
        if sql.startswith("INSERT"):
            self._next_id += 1
        return 1

    def last_insert_id(self):
        return self._next_id

    def begin_transaction(self):
        self._record("begin")
        self._in_transaction = True

    def commit(self):
        self._record("commit")
        self._in_transaction = False

    def rollback(self):
        self._record("rollback")
        self._in_transaction = False

    def in_transaction(self):
        return self._in_transaction

    def count(self, name):
        return self.calls.count(name)


@pytest.fixture
def clock():
    """固定时钟，起点 2024-01-01 00:00:00"""
    return FixedClock(datetime(2024, 1, 1, 0, 0, 0))


@pytest.fixture
def connection():
    """已建表的内存数据库连接"""
    conn = SQLiteConnection(":memory:")
    conn.init_schema()
    yield conn
    conn.close()


@pytest.fixture
def recording_connection():
    return RecordingConnection()
