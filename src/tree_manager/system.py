"""
树管理系统主入口
装配配置、日志、存储、仓库、工作单元和服务，提供统一的访问入口
"""

import logging
from typing import Dict, List, Optional, Any, Union
from pathlib import Path

from .interfaces import IClock, IDatabaseConnection, ITreeRepository
from .config.settings import SystemSettings
from .core.time.clock import SystemClock
from .core.tree.entity import Tree
from .core.node import NodeFactory, TreeStructureBuilder, TreeNode
from .data.mapper import TreeDataMapper, TreeNodeDataMapper
from .data.storage import SQLiteConnection, DatabaseUnitOfWork
from .data.cache import InMemoryCache
from .data.repository import TreeRepository, TreeNodeRepository, CachedTreeRepository
from .services import TreeService
from .services.import_export import OutlineImporter


class TreeSystem:
    """
    树管理系统主类

    传入 connection 时由调用方负责它的生命周期和表结构；
    否则按配置打开 SQLite 连接并初始化表结构，close() 时关闭
    """

    def __init__(
            self,
            config: Optional[Union[Dict[str, Any], SystemSettings]] = None,
            connection: Optional[IDatabaseConnection] = None,
            clock: Optional[IClock] = None
    ):
        """
        初始化系统

        Args:
            config: 配置字典或 SystemSettings
            connection: 数据库连接（默认按配置打开 SQLiteConnection）
            clock: 时钟（默认系统时钟）
        """
        # 加载配置
        if isinstance(config, SystemSettings):
            self.settings = config
        else:
            self.settings = SystemSettings.from_dict(config) if config else SystemSettings()

        # 初始化日志
        self._setup_logging()
        self.logger = logging.getLogger(__name__)

        self._clock = clock or SystemClock()

        # 存储
        self._owns_connection = connection is None
        if connection is None:
            connection = SQLiteConnection(
                self.settings.database_path,
                timeout=self.settings.connection_timeout
            )
            connection.init_schema()
        self._connection = connection
        self.logger.info(f"使用数据库连接: {self._connection.__class__.__name__}")

        # 仓库
        tree_repository: ITreeRepository = TreeRepository(
            connection,
            mapper=TreeDataMapper(self._clock, time_format=self.settings.time_format),
            clock=self._clock
        )
        self._cache: Optional[InMemoryCache] = None
        if self.settings.enable_cache:
            self._cache = InMemoryCache(self._clock)
            tree_repository = CachedTreeRepository(tree_repository, self._cache, ttl=self.settings.cache_ttl)
            self.logger.debug(f"启用树缓存: ttl={self.settings.cache_ttl}秒")
        self._tree_repository = tree_repository

        self._node_repository = TreeNodeRepository(
            connection,
            mapper=TreeNodeDataMapper(),
            builder=TreeStructureBuilder(),
            clock=self._clock
        )

        # 服务
        self._unit_of_work = DatabaseUnitOfWork(connection)
        self._node_factory = NodeFactory(default_button_text=self.settings.default_button_text)
        self._tree_service = TreeService(
            self._tree_repository,
            self._node_repository,
            self._unit_of_work,
            node_factory=self._node_factory,
            clock=self._clock
        )

        self._closed = False
        self.logger.info(f"{self.settings.system_name} v{self.settings.version} 初始化完成")

    def _setup_logging(self):
        """配置日志系统"""
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if self.settings.log_file:
            Path(self.settings.log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.settings.log_file, encoding="utf-8"))

        logging.basicConfig(
            level=getattr(logging, self.settings.log_level),
            format=self.settings.log_format,
            handlers=handlers
        )

    # ========== 组件 ==========

    @property
    def connection(self) -> IDatabaseConnection:
        return self._connection

    @property
    def tree_repository(self) -> ITreeRepository:
        return self._tree_repository

    @property
    def node_repository(self) -> TreeNodeRepository:
        return self._node_repository

    @property
    def unit_of_work(self) -> DatabaseUnitOfWork:
        return self._unit_of_work

    @property
    def node_factory(self) -> NodeFactory:
        return self._node_factory

    @property
    def tree_service(self) -> TreeService:
        return self._tree_service

    @property
    def cache(self) -> Optional[InMemoryCache]:
        return self._cache

    # ========== 便捷操作 ==========

    def create_tree(
            self,
            name: str,
            description: Optional[str] = None,
            nodes: Optional[List[Dict[str, Any]]] = None
    ) -> Tree:
        return self._tree_service.create_tree_with_nodes(name, description, nodes or [])

    def get_tree_structure(self, tree_id: int) -> List[TreeNode]:
        return self._tree_service.get_tree_structure(tree_id)

    def import_file(
            self,
            file_path: str,
            name: Optional[str] = None,
            description: Optional[str] = None,
            importer_config: Optional[Dict[str, Any]] = None
    ) -> Tree:
        """
        从大纲表格导入一棵树

        Args:
            file_path: .xlsx/.xls/.csv 文件路径
            name: 树名称，默认取文件名
            description: 描述
            importer_config: 导入器配置（例如 sheet_name）
        """
        importer = OutlineImporter(importer_config)
        node_specs = importer.import_data(file_path)
        tree_name = name or Path(file_path).stem
        self.logger.info(f"导入文件 {file_path}: {len(node_specs)} 个节点")
        return self._tree_service.import_tree(tree_name, description, node_specs)

    # ========== 生命周期 ==========

    def close(self) -> None:
        """关闭系统，释放自己打开的连接"""
        if self._closed:
            return

        if self._cache is not None:
            self._cache.clear()
        if self._owns_connection and hasattr(self._connection, "close"):
            self._connection.close()

        self._closed = True
        self.logger.info("系统已关闭")

    def __enter__(self) -> 'TreeSystem':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
