"""
缓存模块
"""

from .memory_cache import InMemoryCache

__all__ = ['InMemoryCache']
