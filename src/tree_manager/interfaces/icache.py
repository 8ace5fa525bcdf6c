"""
缓存接口
"""
from abc import ABC, abstractmethod
from typing import Any


class ICache(ABC):
    """缓存接口 - 键为字符串，值任意，带过期时间"""

    @abstractmethod
    def get(self, key: str) -> Any:
        """获取缓存值，未命中或已过期返回None"""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """
        写入缓存

        Args:
            key: 缓存键
            value: 缓存值
            ttl: 存活秒数
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """删除缓存项"""
        pass

    @abstractmethod
    def clear(self) -> bool:
        """清空缓存"""
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        """检查缓存项是否存在且未过期"""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """清理所有已过期的缓存项"""
        pass
