"""
存储模块专用异常
"""
from ...exceptions import DataStoreError


class StorageConnectionError(DataStoreError):
    """存储连接异常"""
    def __init__(self, message: str, store_type: str, **kwargs):
        super().__init__(
            message=f"存储连接失败: {message}",
            operation="CONNECT",
            store_type=store_type,
            **kwargs
        )


class StorageOperationError(DataStoreError):
    """存储操作异常"""
    def __init__(self, message: str, operation: str, store_type: str, sql: str = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if sql:
            details["sql"] = sql
        super().__init__(
            message=f"存储操作失败[{operation}]: {message}",
            operation=operation,
            store_type=store_type,
            details=details,
            **kwargs
        )
