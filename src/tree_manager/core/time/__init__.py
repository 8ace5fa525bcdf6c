"""
时间模块
"""

from .clock import SystemClock, FixedClock

__all__ = ['SystemClock', 'FixedClock']
