"""配置模块初始化文件"""

from .settings import DatabaseConfig, DatabaseConfigManager, DEFAULT_PORTS

__all__ = [
    'DatabaseConfig',
    'DatabaseConfigManager',
    'DEFAULT_PORTS'
]
