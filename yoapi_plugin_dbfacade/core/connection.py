"""
数据库连接管理模块
持有至多一个活动的数据库后端连接，由调用方显式创建和持有，不使用全局单例
"""

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional, Type, Union

from .base import BackendType, DatabaseBackend
from .mongo import MongoBackend
from .mysql import MySQLBackend
from ..config.settings import DatabaseConfig
from ..exceptions.database import NoConnectionError

logger = logging.getLogger(__name__)

BACKENDS: Dict[BackendType, Type[DatabaseBackend]] = {
    BackendType.MYSQL: MySQLBackend,
    BackendType.MONGODB: MongoBackend,
}


class DatabaseConnectionManager:
    """数据库连接管理器"""

    def __init__(self):
        self._backend: Optional[DatabaseBackend] = None

    def init(self, credentials: Union[DatabaseConfig, Mapping[str, Any]],
             backend_type: Union[BackendType, str, None] = None) -> Any:
        """
        建立数据库连接

        Args:
            credentials: DatabaseConfig 或包含 host, username, password, database, port 的映射
            backend_type: 数据库类型，未指定时使用凭据中的 backend

        Returns:
            Any: 原生连接对象

        Raises:
            DatabaseConfigError: 凭据不完整或数据库类型不受支持
            DatabaseConnectionError: 连接失败，此时不持有任何连接
        """
        if not isinstance(credentials, DatabaseConfig):
            credentials = DatabaseConfig.from_mapping(credentials)

        kind = BackendType.parse(backend_type if backend_type is not None else credentials.backend)
        if credentials.backend != kind.value:
            credentials = dataclasses.replace(credentials, backend=kind.value)

        if self._backend is not None:
            logger.warning("Closing existing database connection before reconnecting")
            self.close()

        backend = BACKENDS[kind]()
        connection = backend.connect(credentials)
        self._backend = backend
        logger.info(f"Database connection established ({kind.value})")
        return connection

    @property
    def is_connected(self) -> bool:
        return self._backend is not None

    @property
    def backend(self) -> DatabaseBackend:
        """当前连接的后端，未连接时抛出 NoConnectionError"""
        if self._backend is None:
            raise NoConnectionError()
        return self._backend

    def get_connection(self) -> Any:
        return self.backend.get_connection()

    def close(self) -> None:
        """关闭连接，未连接时抛出 NoConnectionError"""
        backend = self.backend
        self._backend = None
        backend.close()
        logger.info("Database connection closed")

    def __enter__(self) -> "DatabaseConnectionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._backend is not None:
            self.close()
