"""
数据导入器基类
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional

from ...exceptions import InvalidArgumentError


class ImportDataError(InvalidArgumentError):
    """导入过程异常"""
    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if file_path:
            details["file_path"] = file_path
        kwargs.setdefault("code", "IMPORT_ERROR")
        super().__init__(message, details=details, **kwargs)


class DataImporter(ABC):
    """数据导入器抽象基类"""

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self._validate_config()

    def _validate_config(self):
        """验证配置参数"""
        pass

    @abstractmethod
    def validate_file(self, file_path: str) -> bool:
        """验证文件是否可导入"""
        pass

    @abstractmethod
    def extract_metadata(self, file_path: str) -> Dict[str, Any]:
        """提取文件元数据"""
        pass

    @abstractmethod
    def parse_data(self, file_path: str) -> List[Dict[str, Any]]:
        """解析数据为标准化格式"""
        pass

    @abstractmethod
    def convert_to_tree_nodes(self, data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """将数据转换为节点数据（TreeService.import_tree 的输入格式）"""
        pass

    def import_data(self, file_path: str) -> List[Dict[str, Any]]:
        """
        导入数据的完整流程
        1. 验证文件
        2. 解析数据
        3. 转换为节点数据
        """
        if not self.validate_file(file_path):
            raise ImportDataError(f"文件验证失败: {file_path}", file_path=file_path)

        data = self.parse_data(file_path)
        return self.convert_to_tree_nodes(data)
