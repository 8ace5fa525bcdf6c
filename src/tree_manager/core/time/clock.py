"""
时钟实现
"""
from datetime import datetime, timedelta
from typing import Optional

from ...interfaces import IClock


class SystemClock(IClock):
    """系统时钟，精度截断到秒（与持久化的文本格式一致）"""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)


class FixedClock(IClock):
    """
    固定时钟

    时间只在调用 advance/set 时变化，用于让时间戳可预测
    """

    def __init__(self, start: Optional[datetime] = None):
        self._current = (start or datetime(2024, 1, 1, 0, 0, 0)).replace(microsecond=0)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: int = 1) -> datetime:
        """向前拨动时间"""
        self._current = self._current + timedelta(seconds=seconds)
        return self._current

    def set(self, value: datetime) -> None:
        self._current = value.replace(microsecond=0)

    def __repr__(self) -> str:
        return f"FixedClock({self._current.isoformat()})"
