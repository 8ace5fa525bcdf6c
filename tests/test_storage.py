"""
测试SQLite连接、工作单元和内存缓存
"""
import pytest

from tree_manager.data.storage import (
    SQLiteConnection, DatabaseUnitOfWork, TransactionState, StorageOperationError
)
from tree_manager.data.cache import InMemoryCache
from tree_manager.exceptions import TransactionError, StorageError


def insert_tree(conn, name):
    """插入一行树数据"""
    conn.execute(
        "INSERT INTO trees (name, created_at, updated_at) VALUES (?, ?, ?)",
        [name, "2024-01-01 00:00:00", "2024-01-01 00:00:00"]
    )


class TestSQLiteConnection:
    """测试SQLite连接"""

    def test_insert_and_query(self, connection):
        connection.execute(
            "INSERT INTO trees (name, description, created_at, updated_at, is_active) VALUES (?, ?, ?, ?, ?)",
            ["Docs", None, "2024-01-01 00:00:00", "2024-01-01 00:00:00", 1]
        )
        tree_id = connection.last_insert_id()

        rows = connection.query("SELECT id, name, is_active FROM trees WHERE id = ?", [tree_id])
        assert rows == [{'id': tree_id, 'name': "Docs", 'is_active': 1}]

    def test_parameters_are_not_interpolated(self, connection):
        """测试参数按值绑定"""
        name = "x'); DROP TABLE trees; --"
        insert_tree(connection, name)
        assert connection.query("SELECT name FROM trees")[0]['name'] == name

    def test_transaction_rollback(self, connection):
        connection.begin_transaction()
        assert connection.in_transaction()
        insert_tree(connection, "temp")
        connection.rollback()

        assert not connection.in_transaction()
        assert connection.query("SELECT * FROM trees") == []

    def test_transaction_commit(self, connection):
        connection.begin_transaction()
        insert_tree(connection, "kept")
        connection.commit()
        assert len(connection.query("SELECT * FROM trees")) == 1

    def test_nested_begin_rejected(self, connection):
        connection.begin_transaction()
        with pytest.raises(TransactionError):
            connection.begin_transaction()
        connection.rollback()

    def test_sql_error_wrapped(self, connection):
        with pytest.raises(StorageOperationError) as exc_info:
            connection.query("SELECT * FROM missing_table")
        assert isinstance(exc_info.value, StorageError)
        assert exc_info.value.details["sql"] == "SELECT * FROM missing_table"

    def test_last_insert_id_without_insert(self):
        with SQLiteConnection() as conn:
            with pytest.raises(StorageOperationError):
                conn.last_insert_id()

    def test_file_database(self, tmp_path):
        """测试文件数据库跨连接保存数据"""
        db_path = str(tmp_path / "data" / "trees.db")
        with SQLiteConnection(db_path) as conn:
            conn.init_schema()
            insert_tree(conn, "persisted")

        with SQLiteConnection(db_path) as conn:
            assert conn.query("SELECT name FROM trees") == [{'name': "persisted"}]


class TestDatabaseUnitOfWork:
    """测试工作单元"""

    def test_commit_flow(self, recording_connection):
        uow = DatabaseUnitOfWork(recording_connection)

        uow.begin_transaction()
        assert uow.in_transaction()
        uow.register_new("entity")
        uow.commit()

        assert not uow.in_transaction()
        assert recording_connection.calls == ["begin", "commit"]
        assert uow.new_entities == []

    def test_begin_twice_fails(self, recording_connection):
        uow = DatabaseUnitOfWork(recording_connection)
        uow.begin_transaction()
        with pytest.raises(TransactionError):
            uow.begin_transaction()
        assert recording_connection.count("begin") == 1

    def test_commit_without_transaction_fails(self, recording_connection):
        uow = DatabaseUnitOfWork(recording_connection)
        with pytest.raises(TransactionError):
            uow.commit()
        assert recording_connection.calls == []

    def test_failed_commit_rolls_back(self, recording_connection):
        """测试提交失败时先回滚再抛出原异常"""
        recording_connection.fail_on.add("commit")
        uow = DatabaseUnitOfWork(recording_connection)
        uow.begin_transaction()

        with pytest.raises(StorageOperationError):
            uow.commit()

        assert recording_connection.calls == ["begin", "commit", "rollback"]
        assert not uow.in_transaction()

        # 再次回滚不会触达连接
        uow.rollback()
        assert recording_connection.count("rollback") == 1

    def test_register_hooks(self, recording_connection):
        uow = DatabaseUnitOfWork(recording_connection)
        uow.begin_transaction()
        uow.register_new("a")
        uow.register_dirty("b")
        uow.register_deleted("c")

        assert (uow.new_entities, uow.dirty_entities, uow.deleted_entities) == (["a"], ["b"], ["c"])
        uow.rollback()
        assert uow.dirty_entities == []

    def test_context_manager(self, recording_connection):
        uow = DatabaseUnitOfWork(recording_connection)
        with uow.transaction():
            pass
        assert recording_connection.calls == ["begin", "commit"]

        with pytest.raises(RuntimeError):
            with uow.transaction():
                raise RuntimeError("boom")
        assert recording_connection.calls[-2:] == ["begin", "rollback"]
        assert recording_connection.count("commit") == 1

    def test_context_manager_after_manual_rollback(self, recording_connection):
        """测试上下文内主动回滚后不再提交"""
        uow = DatabaseUnitOfWork(recording_connection)
        with uow.transaction() as tx:
            tx.rollback()

        assert recording_connection.calls == ["begin", "rollback"]
        assert uow._state is TransactionState.IDLE

    def test_commit_error_kept_when_rollback_fails(self, recording_connection):
        """测试回滚也失败时抛出的仍是提交异常"""
        uow = DatabaseUnitOfWork(recording_connection)
        uow.begin_transaction()
        recording_connection.fail_on.update({"commit", "rollback"})

        with pytest.raises(StorageOperationError) as exc_info:
            uow.commit()

        assert exc_info.value.details["operation"] == "commit"
        assert recording_connection.calls == ["begin", "commit", "rollback"]
        assert not uow.in_transaction()

    def test_body_error_kept_when_rollback_fails(self, recording_connection):
        """测试上下文内的异常不会被回滚异常覆盖"""
        uow = DatabaseUnitOfWork(recording_connection)
        recording_connection.fail_on.add("rollback")

        with pytest.raises(RuntimeError, match="boom"):
            with uow.transaction():
                raise RuntimeError("boom")

        assert recording_connection.calls == ["begin", "rollback"]
        assert not uow.in_transaction()


class TestInMemoryCache:
    """测试内存缓存"""

    def test_set_get_delete(self, clock):
        cache = InMemoryCache(clock)
        cache.set("k", {"v": 1})

        assert cache.get("k") == {"v": 1}
        assert cache.has("k")
        assert "k" in cache

        cache.delete("k")
        assert cache.get("k") is None
        cache.delete("missing")

    def test_expiry(self, clock):
        """测试过期判断：恰好到期时仍然有效，之后失效"""
        cache = InMemoryCache(clock)
        cache.set("k", "v", ttl=10)

        clock.advance(10)
        assert cache.get("k") == "v"

        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_cleanup_and_clear(self, clock):
        cache = InMemoryCache(clock)
        cache.set("short", 1, ttl=1)
        cache.set("long", 2, ttl=100)

        clock.advance(5)
        cache.cleanup()
        assert len(cache) == 1
        assert cache.get("long") == 2

        cache.clear()
        assert len(cache) == 0
