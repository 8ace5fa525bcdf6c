"""
大纲导入器
从 Excel/CSV 表格导入树：每行一个节点，level 列给出层级（0为根）
"""
import os
import logging
from typing import Dict, List, Any, Optional
from datetime import datetime
from pathlib import Path

import pandas as pd

from ...exceptions import ConfigError
from ...core.node.entity import SimpleNode, ButtonNode
from .base_importer import DataImporter, ImportDataError

logger = logging.getLogger(__name__)


class OutlineImporter(DataImporter):
    """
    大纲导入器

    支持的列（列名不区分大小写）：
    1. name、level：必需
    2. type：节点类型，缺省为 SimpleNode
    3. button_text、button_action：ButtonNode 的类型数据
    4. sort_order：排序号，缺省为在同级节点中的出现顺序

    父节点是之前最近一个层级更小的行
    """

    SUPPORTED_EXTENSIONS = ('.xlsx', '.xls', '.csv')
    REQUIRED_COLUMNS = ('name', 'level')
    TYPE_DATA_COLUMNS = ('button_text', 'button_action')

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.sheet_name = self.config.get('sheet_name', 0)

        # 统计信息
        self.stats = {
            'files_processed': 0,
            'rows_skipped': 0,
            'nodes_parsed': 0,
        }

    def _validate_config(self):
        """sheet_name 只能是工作表序号或名称"""
        sheet_name = self.config.get('sheet_name', 0)
        if isinstance(sheet_name, bool) or not isinstance(sheet_name, (int, str)):
            raise ConfigError(
                f"sheet_name 必须是工作表序号或名称: {sheet_name!r}",
                config_key='sheet_name'
            )

    # ============ 抽象方法实现 ============

    def validate_file(self, file_path: str) -> bool:
        path = Path(file_path)
        return path.is_file() and path.suffix.lower() in self.SUPPORTED_EXTENSIONS

    def extract_metadata(self, file_path: str) -> Dict[str, Any]:
        """提取文件元数据"""
        metadata = {
            'file_path': file_path,
            'file_name': Path(file_path).name,
            'import_time': datetime.now().isoformat(),
            'config': self.config
        }

        if os.path.exists(file_path):
            file_stat = os.stat(file_path)
            metadata.update({
                'file_size': file_stat.st_size,
                'modified_time': datetime.fromtimestamp(file_stat.st_mtime).isoformat()
            })

        return metadata

    def parse_data(self, file_path: str) -> List[Dict[str, Any]]:
        """
        解析表格为行数据

        Returns:
            [{'row_index', 'name', 'level', 'type', 'type_data', 'sort_order'}, ...]
            sort_order 未给出时为 None

        Raises:
            ImportDataError: 文件无法读取、缺少必需列或层级无效
        """
        if not self.validate_file(file_path):
            raise ImportDataError(f"无效的文件: {file_path}", file_path=file_path)

        df = self._read_frame(file_path)
        df.columns = [str(column).strip().lower() for column in df.columns]

        missing = [column for column in self.REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise ImportDataError(
                f"缺少必需列: {', '.join(missing)}",
                file_path=file_path,
                details={"columns": list(df.columns)}
            )

        parsed_rows = []
        for idx, row in df.iterrows():
            name = self._cell(row, 'name')
            if name is None or not str(name).strip():
                self.stats['rows_skipped'] += 1
                continue

            parsed_rows.append({
                'row_index': idx,
                'name': str(name).strip(),
                'level': self._parse_level(row, idx),
                'type': self._cell(row, 'type') or SimpleNode.node_type,
                'type_data': self._parse_type_data(row),
                'sort_order': self._parse_sort_order(row, idx),
            })
            self.stats['nodes_parsed'] += 1

        self.stats['files_processed'] += 1
        logger.debug(f"解析 {file_path}: {len(parsed_rows)} 行，跳过 {self.stats['rows_skipped']} 行")
        return parsed_rows

    def convert_to_tree_nodes(self, parsed_data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        转换为节点数据

        parent_ref 是父节点在返回列表中的下标，根节点为 None
        """
        node_specs = []
        hierarchy = []  # 存储(level, 下标)元组
        sibling_counts: Dict[Optional[int], int] = {}

        for row in parsed_data:
            level = row['level']

            # 查找父节点
            parent_ref = None
            for prev_level, prev_index in reversed(hierarchy):
                if prev_level < level:
                    parent_ref = prev_index
                    break

            # 更新层级路径
            hierarchy = [(l, i) for l, i in hierarchy if l < level]
            hierarchy.append((level, len(node_specs)))

            position = sibling_counts.get(parent_ref, 0)
            sibling_counts[parent_ref] = position + 1
            sort_order = row['sort_order'] if row['sort_order'] is not None else position

            node_specs.append({
                'name': row['name'],
                'type': row['type'],
                'type_data': dict(row['type_data']),
                'sort_order': sort_order,
                'parent_ref': parent_ref,
            })

        return node_specs

    # ============ 内部方法 ============

    def _read_frame(self, file_path: str) -> pd.DataFrame:
        try:
            if Path(file_path).suffix.lower() == '.csv':
                return pd.read_csv(file_path)
            return pd.read_excel(file_path, sheet_name=self.sheet_name)
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise ImportDataError(f"读取文件失败: {e}", file_path=file_path) from e

    @staticmethod
    def _cell(row: pd.Series, column: str) -> Any:
        if column not in row.index:
            return None
        value = row[column]
        if pd.isna(value):
            return None
        return value

    def _parse_level(self, row: pd.Series, idx: Any) -> int:
        raw = self._cell(row, 'level')
        try:
            level = int(float(raw))
        except (TypeError, ValueError):
            raise ImportDataError(f"第 {idx} 行层级无效: {raw}") from None

        if level < 0:
            raise ImportDataError(f"第 {idx} 行层级不能为负数: {level}")
        return level

    def _parse_sort_order(self, row: pd.Series, idx: Any) -> Optional[int]:
        raw = self._cell(row, 'sort_order')
        if raw is None:
            return None
        try:
            return int(float(raw))
        except (TypeError, ValueError):
            raise ImportDataError(f"第 {idx} 行排序号无效: {raw}") from None

    def _parse_type_data(self, row: pd.Series) -> Dict[str, Any]:
        node_type = self._cell(row, 'type')
        if node_type != ButtonNode.node_type:
            return {}

        type_data = {}
        for column in self.TYPE_DATA_COLUMNS:
            value = self._cell(row, column)
            if value is not None:
                type_data[column] = str(value)
        return type_data
