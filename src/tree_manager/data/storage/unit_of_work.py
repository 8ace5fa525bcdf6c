"""
工作单元
界定一次业务操作中所有写入的事务边界
"""
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, List

from ...interfaces import IDatabaseConnection
from ...exceptions import TransactionError

logger = logging.getLogger(__name__)


class TransactionState(Enum):
    IDLE = "idle"
    IN_TRANSACTION = "in_transaction"


class DatabaseUnitOfWork:
    """
    数据库工作单元

    状态机：IDLE -> IN_TRANSACTION -> IDLE（提交或回滚后回到IDLE）。
    写操作由仓库在事务内立即执行，工作单元只负责原子性，不做批量延迟写入。
    register_* 只记录实体，作为以后批量刷新的扩展点，提交或回滚时清空。
    """

    def __init__(self, connection: IDatabaseConnection):
        self._connection = connection
        self._state = TransactionState.IDLE
        self._new_entities: List[Any] = []
        self._dirty_entities: List[Any] = []
        self._deleted_entities: List[Any] = []

    # ========== 实体登记 ==========

    def register_new(self, entity: Any) -> None:
        self._new_entities.append(entity)

    def register_dirty(self, entity: Any) -> None:
        self._dirty_entities.append(entity)

    def register_deleted(self, entity: Any) -> None:
        self._deleted_entities.append(entity)

    @property
    def new_entities(self) -> List[Any]:
        return list(self._new_entities)

    @property
    def dirty_entities(self) -> List[Any]:
        return list(self._dirty_entities)

    @property
    def deleted_entities(self) -> List[Any]:
        return list(self._deleted_entities)

    # ========== 事务控制 ==========

    def begin_transaction(self) -> None:
        """
        开启事务

        Raises:
            TransactionError: 已经处于事务中
        """
        if self._state is TransactionState.IN_TRANSACTION:
            raise TransactionError("Transaction already in progress")

        self._connection.begin_transaction()
        self._state = TransactionState.IN_TRANSACTION
        logger.debug("事务开始")

    def commit(self) -> None:
        """
        提交事务

        提交失败时先回滚，再原样抛出异常

        Raises:
            TransactionError: 当前没有事务
        """
        if self._state is not TransactionState.IN_TRANSACTION:
            raise TransactionError("No transaction in progress")

        try:
            self._connection.commit()
        except Exception as e:
            logger.error(f"事务提交失败，执行回滚: {e}")
            self._rollback_after_failure()
            raise

        self._state = TransactionState.IDLE
        self._clear()
        logger.debug("事务已提交")

    def rollback(self) -> None:
        """
        回滚事务

        没有进行中的事务时不做任何事（提交失败后已经回滚过）
        """
        if self._state is not TransactionState.IN_TRANSACTION:
            self._clear()
            return

        try:
            self._connection.rollback()
        finally:
            self._state = TransactionState.IDLE
            self._clear()
        logger.warning("事务已回滚")

    def in_transaction(self) -> bool:
        return self._state is TransactionState.IN_TRANSACTION

    @contextmanager
    def transaction(self):
        """
        事务上下文管理器

        正常退出时提交，出现异常时回滚并重新抛出
        """
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self._rollback_after_failure()
            raise
        # 上下文内已经主动回滚的事务不再提交
        if self.in_transaction():
            self.commit()

    def _rollback_after_failure(self) -> None:
        # 回滚失败只记录日志，调用方收到的始终是最初的异常
        try:
            self.rollback()
        except Exception as e:
            logger.error(f"回滚失败: {e}")

    def _clear(self) -> None:
        self._new_entities = []
        self._dirty_entities = []
        self._deleted_entities = []
