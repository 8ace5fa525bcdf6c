"""
存储模块
提供数据库连接、表结构和工作单元
"""

from .connection import SQLiteConnection, MEMORY_DB
from .unit_of_work import DatabaseUnitOfWork, TransactionState
from .exceptions import StorageConnectionError, StorageOperationError
from .schema import SCHEMA_SQL

__all__ = [
    'SQLiteConnection',
    'MEMORY_DB',
    'DatabaseUnitOfWork',
    'TransactionState',
    'StorageConnectionError',
    'StorageOperationError',
    'SCHEMA_SQL'
]
