"""
内部公共API接口模块
提供统一的数据库访问门面，把查询操作转发给当前连接的后端
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..config.settings import DatabaseConfig
from ..core.base import BackendType
from ..core.connection import DatabaseConnectionManager
from ..services.crud import QueryAction, perform as build_query

logger = logging.getLogger(__name__)


class DatabaseInternalAPI:
    """
    数据库内部公共API接口

    所有查询操作在没有连接时抛出 NoConnectionError，
    后端拒绝语句时抛出携带原生错误码的 DatabaseQueryError
    """

    def __init__(self, connection_manager: Optional[DatabaseConnectionManager] = None):
        self._connection_manager = connection_manager or DatabaseConnectionManager()

    @property
    def connection_manager(self) -> DatabaseConnectionManager:
        return self._connection_manager

    # ========== 连接管理 ==========

    def init(self, credentials: Union[DatabaseConfig, Mapping[str, Any]],
             backend_type: Union[BackendType, str, None] = None) -> Any:
        """建立连接，返回原生连接对象"""
        return self._connection_manager.init(credentials, backend_type)

    @property
    def is_connected(self) -> bool:
        return self._connection_manager.is_connected

    def get_connection(self) -> Any:
        return self._connection_manager.get_connection()

    def close(self) -> None:
        self._connection_manager.close()

    # ========== 查询操作 ==========

    def query(self, query: Any) -> Any:
        """
        执行单条命令

        Args:
            query: SQL语句（MySQL）或命令文档/JSON文本（MongoDB）

        Returns:
            Any: 后端原生结果对象
        """
        return self._connection_manager.backend.query(query)

    def multi_query(self, queries: Any) -> Any:
        """执行一批命令，MySQL为分号分隔的语句"""
        return self._connection_manager.backend.multi_query(queries)

    def exec_procedure(self, procedure: str, args: Optional[Sequence[Any]] = None) -> List[dict]:
        """
        执行存储过程

        Args:
            procedure: 存储过程名
            args: 按位置传入的参数，单个值视为一个参数

        Returns:
            List[dict]: 所有结果集中的行，按返回顺序排列
        """
        return self._connection_manager.backend.exec_procedure(procedure, args)

    def get_num_rows(self, result: Any = None) -> int:
        return self._connection_manager.backend.get_num_rows(result)

    def get_array(self, result: Any = None) -> Optional[dict]:
        return self._connection_manager.backend.get_array(result)

    def get_insert_id(self) -> Any:
        return self._connection_manager.backend.get_insert_id()

    def perform(self, table: str,
                data: Union[Mapping[str, Any], Iterable[str]],
                action: Union[str, QueryAction] = QueryAction.INSERT,
                filter: Optional[str] = None) -> Any:
        """
        构建SQL语句并执行

        动作非法时在提交任何语句之前抛出 UnsupportedActionError

        Returns:
            Any: 后端原生结果对象
        """
        backend = self._connection_manager.backend
        statement = build_query(table, data, action, filter)
        return backend.perform(statement)

    def __enter__(self) -> "DatabaseInternalAPI":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.is_connected:
            self.close()
