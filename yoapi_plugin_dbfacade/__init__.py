"""
yoapi-plugin-dbfacade - MySQL / MongoDB 数据库门面
提供单连接管理、命令透传和简单的SQL语句构建
"""

import logging
from typing import Any, Mapping, Optional, Union

from .config.settings import DatabaseConfig, DatabaseConfigManager
from .core.base import BackendType
from .core.connection import DatabaseConnectionManager
from .interfaces.internal_api import DatabaseInternalAPI
from .services.crud import QueryAction, perform
from .exceptions.database import (
    DatabaseError,
    NoConnectionError,
    DatabaseConnectionError,
    DatabaseQueryError,
    QueryBuildError,
    UnsupportedActionError,
    UnsupportedOperationError,
    DatabaseConfigError
)

__version__ = "1.0.0"

__all__ = [
    'create_database',
    'DatabaseConfig',
    'DatabaseConfigManager',
    'BackendType',
    'DatabaseConnectionManager',
    'DatabaseInternalAPI',
    'QueryAction',
    'perform',
    'DatabaseError',
    'NoConnectionError',
    'DatabaseConnectionError',
    'DatabaseQueryError',
    'QueryBuildError',
    'UnsupportedActionError',
    'UnsupportedOperationError',
    'DatabaseConfigError'
]


def create_database(config: Union[DatabaseConfig, Mapping[str, Any], None] = None,
                    env_file: Optional[str] = None,
                    backend_type: Union[BackendType, str, None] = None) -> DatabaseInternalAPI:
    """
    创建并连接数据库门面

    Args:
        config: 数据库凭据，为None时从 .env 文件和 DATABASE_* 环境变量加载
        env_file: 可选的 .env 文件路径
        backend_type: 覆盖凭据中的数据库类型

    Returns:
        DatabaseInternalAPI: 已连接的数据库门面，由调用方负责关闭
    """
    logger = logging.getLogger(__name__)

    if config is None:
        config = DatabaseConfigManager(env_file=env_file).get_default_config()

    db_api = DatabaseInternalAPI()
    db_api.init(config, backend_type)
    logger.info("数据库门面已连接")
    return db_api
