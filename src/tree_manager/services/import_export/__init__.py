"""
导入导出
"""
from .base_importer import DataImporter, ImportDataError
from .outline_importer import OutlineImporter

__all__ = ['DataImporter', 'ImportDataError', 'OutlineImporter']
