"""
接口定义包
"""

from .iconnection import IDatabaseConnection
from .iclock import IClock
from .icache import ICache
from .irepository import ITreeRepository, ITreeNodeRepository
from .ivisitor import ITreeNodeVisitor

__all__ = [
    'IDatabaseConnection',
    'IClock',
    'ICache',
    'ITreeRepository',
    'ITreeNodeRepository',
    'ITreeNodeVisitor',
]
