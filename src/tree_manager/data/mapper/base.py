"""
数据映射器基类定义
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List


class DataMapper(ABC):
    """数据库行 <-> 领域实体 的映射器抽象基类"""

    @abstractmethod
    def map_to_entity(self, data: Dict[str, Any]) -> Any:
        """把一行数据映射为实体"""
        pass

    @abstractmethod
    def map_to_array(self, entity: Any) -> Dict[str, Any]:
        """把实体映射为一行数据"""
        pass

    def map_to_entities(self, rows: Iterable[Dict[str, Any]]) -> List[Any]:
        """批量映射"""
        return [self.map_to_entity(row) for row in rows]
