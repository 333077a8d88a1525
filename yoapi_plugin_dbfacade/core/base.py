"""
数据库后端接口定义
每种后端（MySQL、MongoDB）实现同一组能力，连接管理器在初始化时按类型选择后端
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence

from ..config.settings import DatabaseConfig
from ..exceptions.database import DatabaseConfigError, DatabaseQueryError, UnsupportedOperationError


class BackendType(str, Enum):
    """数据库后端类型"""
    MYSQL = "mysql"
    MONGODB = "mongodb"

    @classmethod
    def parse(cls, value: Any) -> "BackendType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise DatabaseConfigError(f"Unsupported database type: {value}") from None


class DatabaseBackend(ABC):
    """数据库后端抽象基类"""

    backend_type: BackendType

    def __init__(self):
        self._connection: Any = None
        self._last_result: Any = None

    @abstractmethod
    def connect(self, config: DatabaseConfig) -> Any:
        """建立连接并返回原生连接对象"""

    @abstractmethod
    def close(self) -> None:
        """关闭连接"""

    def get_connection(self) -> Any:
        return self._connection

    @abstractmethod
    def query(self, query: Any) -> Any:
        """执行单条命令，返回原生结果对象"""

    @abstractmethod
    def multi_query(self, queries: Any) -> Any:
        """执行一批命令"""

    def exec_procedure(self, procedure: str, args: Optional[Sequence[Any]] = None) -> List[dict]:
        raise UnsupportedOperationError(self.backend_type.value, "exec_procedure")

    @abstractmethod
    def get_num_rows(self, result: Any = None) -> int:
        """结果中的行数"""

    @abstractmethod
    def get_array(self, result: Any = None) -> Optional[dict]:
        """取结果的下一行，没有更多行时返回 None"""

    def get_insert_id(self) -> Any:
        raise UnsupportedOperationError(self.backend_type.value, "get_insert_id")

    def perform(self, statement: str) -> Any:
        """执行由查询构建器生成的SQL语句"""
        raise UnsupportedOperationError(self.backend_type.value, "perform")

    @property
    def last_result(self) -> Any:
        return self._last_result

    def _resolve_result(self, result: Any) -> Any:
        """返回传入的结果对象，未传入时使用最近一次查询的结果"""
        if result is not None:
            return result
        if self._last_result is None:
            raise DatabaseQueryError("No query result available")
        return self._last_result
