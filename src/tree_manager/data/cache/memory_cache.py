"""
内存缓存实现
数据保存在进程内，程序结束即消失
"""
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from ...interfaces import ICache, IClock
from ...core.time.clock import SystemClock


class InMemoryCache(ICache):
    """
    带过期时间的内存缓存

    每个键保存 (值, 过期时间)，读取时发现过期立即淘汰。
    装饰器里的 "先查后写" 不是原子的，所以这里的每个操作都加锁。
    """

    def __init__(self, clock: Optional[IClock] = None):
        self._clock = clock or SystemClock()
        self._lock = threading.RLock()  # 线程安全锁
        self._entries: Dict[str, Tuple[Any, datetime]] = {}

    def get(self, key: str) -> Any:
        with self._lock:
            if not self.has(key):
                return None
            return self._entries[key][0]

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        with self._lock:
            self._entries[key] = (value, self._clock.now() + timedelta(seconds=ttl))
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self._entries.pop(key, None)
            return True

    def clear(self) -> bool:
        with self._lock:
            self._entries.clear()
            return True

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False

            if entry[1] < self._clock.now():
                del self._entries[key]
                return False

            return True

    def cleanup(self) -> None:
        with self._lock:
            now = self._clock.now()
            expired = [key for key, (_, expires_at) in self._entries.items() if expires_at < now]
            for key in expired:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
