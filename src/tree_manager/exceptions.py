"""
树管理系统异常体系
"""
from datetime import datetime
from typing import Dict, Any, Optional


class BaseError(Exception):
    """所有异常的基类"""
    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典，便于序列化"""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ==================== 配置相关异常 ====================
class ConfigError(BaseError):
    """配置错误"""
    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if config_key:
            details["config_key"] = config_key
        kwargs.setdefault("code", "CONFIG_ERROR")
        super().__init__(message, details=details, **kwargs)


# ==================== 参数相关异常 ====================
class InvalidArgumentError(BaseError, ValueError):
    """参数无效"""
    def __init__(self, message: str, argument: Optional[str] = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if argument:
            details.setdefault("argument", argument)
            details.setdefault("value", value)
        kwargs.setdefault("code", "INVALID_ARGUMENT")
        super().__init__(message, details=details, **kwargs)


class TypeMismatchError(BaseError, TypeError):
    """实体类型不匹配（映射器收到了错误的实体）"""
    def __init__(self, expected: str, actual: Any, **kwargs):
        actual_type = type(actual).__name__
        super().__init__(
            message=f"Entity must be an instance of {expected}, got {actual_type}",
            code="TYPE_MISMATCH",
            details={"expected": expected, "actual": actual_type},
            **kwargs
        )


class UnknownNodeTypeError(ConfigError, InvalidArgumentError):
    """未知节点类型，无法解析到具体的节点实现"""
    def __init__(self, node_type: Any, **kwargs):
        super().__init__(
            f"Unknown node type: {node_type}",
            code="UNKNOWN_NODE_TYPE",
            details={"node_type": node_type},
            **kwargs
        )


class TreeIdRequiredError(InvalidArgumentError):
    """创建节点时缺少树ID"""
    def __init__(self, **kwargs):
        super().__init__(
            "Tree ID is required for node creation",
            code="TREE_ID_REQUIRED",
            **kwargs
        )


# ==================== 查找相关异常 ====================
class NotFoundError(BaseError):
    """实体不存在基类"""
    pass


class TreeNotFoundError(NotFoundError, InvalidArgumentError):
    """树不存在"""
    def __init__(self, tree_id: Any, **kwargs):
        super().__init__(
            f"Tree with ID {tree_id} not found",
            code="TREE_NOT_FOUND",
            details={"tree_id": tree_id},
            **kwargs
        )
        self.tree_id = tree_id


class NodeNotFoundError(NotFoundError, InvalidArgumentError):
    """节点不存在"""
    def __init__(self, node_id: Any, **kwargs):
        super().__init__(
            f"Node with ID {node_id} not found",
            code="NODE_NOT_FOUND",
            details={"node_id": node_id},
            **kwargs
        )
        self.node_id = node_id


# ==================== 存储相关异常 ====================
class StorageError(BaseError):
    """存储错误"""
    pass


class DataStoreError(StorageError):
    """数据存储异常"""
    def __init__(self, message: str, operation: str = None, store_type: str = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        details.update({"operation": operation, "store_type": store_type})
        kwargs.setdefault("code", "DATA_STORE_ERROR")
        super().__init__(
            f"存储错误[{operation or 'unknown'}]: {message}",
            details=details,
            **kwargs
        )


class TransactionError(DataStoreError):
    """事务状态错误（重复开启、未开启即提交等）"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, operation="TRANSACTION", code="TRANSACTION_ERROR", **kwargs)
