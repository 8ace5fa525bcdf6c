"""
时钟接口
"""
from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """时钟接口 - 统一提供当前时间，便于测试时固定时间"""

    @abstractmethod
    def now(self) -> datetime:
        """当前时间"""
        pass
