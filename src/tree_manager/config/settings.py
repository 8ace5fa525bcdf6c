"""
系统配置设置
"""
import os
from typing import Dict, Any, Optional, Mapping
from dataclasses import dataclass, asdict, fields

from ..exceptions import ConfigError


@dataclass
class SystemSettings:
    """
    系统配置类
    使用dataclass确保配置的类型安全，启动时一次性构造后显式传入各组件
    """

    # 系统基本配置
    system_name: str = "树管理系统"
    version: str = "1.0.0"

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 存储配置
    database_path: str = ":memory:"
    connection_timeout: float = 30.0

    # 缓存配置
    enable_cache: bool = True
    cache_ttl: int = 3600  # 1小时

    # 时间配置
    time_format: str = "%Y-%m-%d %H:%M:%S"

    # 节点配置
    default_button_text: str = "Test Btn"

    def __post_init__(self):
        """初始化后处理，验证配置"""
        self._validate_settings()

    def _validate_settings(self):
        """验证配置值"""
        # 验证日志级别
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if str(self.log_level).upper() not in valid_log_levels:
            raise ConfigError(
                message=f"无效的日志级别: {self.log_level}",
                config_key="log_level",
                details={"valid_values": valid_log_levels}
            )
        self.log_level = self.log_level.upper()

        # 验证缓存时间
        if int(self.cache_ttl) <= 0:
            raise ConfigError(
                message=f"缓存时间必须大于0: {self.cache_ttl}",
                config_key="cache_ttl"
            )

        if float(self.connection_timeout) <= 0:
            raise ConfigError(
                message=f"连接超时必须大于0: {self.connection_timeout}",
                config_key="connection_timeout"
            )

        if not self.database_path:
            raise ConfigError(message="数据库路径不能为空", config_key="database_path")

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SystemSettings':
        """从字典创建配置"""
        # 过滤无效的配置键
        valid_keys = {field.name for field in fields(cls)}
        filtered_config = {k: v for k, v in config_dict.items() if k in valid_keys}

        return cls(**filtered_config)

    @classmethod
    def from_env(
        cls,
        prefix: str = "TREE_MANAGER_",
        environ: Optional[Mapping[str, str]] = None
    ) -> 'SystemSettings':
        """
        从环境变量创建配置

        变量名为 前缀 + 字段名大写，例如 TREE_MANAGER_DATABASE_PATH

        Args:
            prefix: 环境变量前缀
            environ: 环境变量映射，默认 os.environ
        """
        environ = os.environ if environ is None else environ
        config = {}
        for field in fields(cls):
            raw = environ.get(prefix + field.name.upper())
            if raw is None:
                continue
            config[field.name] = cls._convert(field.name, field.type, raw)
        return cls(**config)

    @staticmethod
    def _convert(name: str, field_type: Any, raw: str) -> Any:
        type_name = getattr(field_type, "__name__", str(field_type))
        try:
            if type_name == "bool":
                return raw.strip().lower() in ("1", "true", "yes", "on")
            if type_name == "int":
                return int(raw)
            if type_name == "float":
                return float(raw)
        except ValueError as e:
            raise ConfigError(message=f"配置值类型错误: {name}={raw}", config_key=name) from e
        return raw
