"""
树数据映射器
"""
from datetime import datetime
from typing import Any, Dict, Optional

from ...interfaces import IClock
from ...exceptions import InvalidArgumentError, TypeMismatchError
from ...core.tree.entity import Tree, DATETIME_FORMAT
from .base import DataMapper


class TreeDataMapper(DataMapper):
    """
    trees 表行 <-> Tree 实体

    时间列使用 "YYYY-MM-DD HH:MM:SS" 文本，is_active 列使用 0/1
    """

    def __init__(self, clock: Optional[IClock] = None, time_format: str = DATETIME_FORMAT):
        self._clock = clock
        self._time_format = time_format

    def map_to_entity(self, data: Dict[str, Any]) -> Tree:
        try:
            return Tree(
                tree_id=int(data['id']),
                name=data['name'],
                description=data.get('description'),
                created_at=self._parse_datetime(data['created_at'], 'created_at'),
                updated_at=self._parse_datetime(data['updated_at'], 'updated_at'),
                is_active=bool(int(data['is_active'])),
                clock=self._clock
            )
        except KeyError as e:
            raise InvalidArgumentError(f"Missing column in tree row: {e.args[0]}", argument=e.args[0]) from e

    def map_to_array(self, entity: Any) -> Dict[str, Any]:
        if not isinstance(entity, Tree):
            raise TypeMismatchError("Tree", entity)

        return {
            'id': entity.id,
            'name': entity.name,
            'description': entity.description,
            'created_at': entity.created_at.strftime(self._time_format),
            'updated_at': entity.updated_at.strftime(self._time_format),
            'is_active': 1 if entity.is_active else 0,
        }

    def format_datetime(self, value: datetime) -> str:
        return value.strftime(self._time_format)

    def _parse_datetime(self, value: Any, column: str) -> datetime:
        if isinstance(value, datetime):
            return value
        try:
            return datetime.strptime(str(value), self._time_format)
        except ValueError as e:
            raise InvalidArgumentError(
                f"Invalid timestamp in column {column}: {value}",
                argument=column,
                value=value
            ) from e
