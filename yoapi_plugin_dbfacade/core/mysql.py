"""
MySQL后端
基于 PyMySQL 的单连接实现，结果对象为原生的 DictCursor
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import pymysql
from pymysql.constants import CLIENT
from pymysql.cursors import DictCursor

from .base import BackendType, DatabaseBackend
from ..config.settings import DatabaseConfig
from ..exceptions.database import DatabaseConnectionError, DatabaseQueryError
from ..services.crud import validate_identifier

logger = logging.getLogger(__name__)


def _error_parts(error: Exception) -> Tuple[Optional[int], str]:
    """拆分 PyMySQL 异常中的错误码和错误信息"""
    args = getattr(error, "args", ())
    if len(args) >= 2 and isinstance(args[0], int):
        return args[0], str(args[1])
    return None, str(error)


def _procedure_args(args: Any) -> Tuple[Any, ...]:
    if args is None:
        return ()
    if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
        return (args,)
    return tuple(args)


class MySQLBackend(DatabaseBackend):
    """MySQL数据库后端"""

    backend_type = BackendType.MYSQL

    def connect(self, config: DatabaseConfig) -> Any:
        """
        建立MySQL连接

        启用 MULTI_STATEMENTS 以支持 multi_query，使用自动提交

        Raises:
            DatabaseConnectionError: 凭据被拒绝或服务器不可达
        """
        logger.info(f"Attempting connection to MySQL database {config.host}:{config.effective_port}/{config.database}")
        try:
            self._connection = pymysql.connect(
                host=config.host,
                port=config.effective_port,
                user=config.username,
                password=config.password,
                database=config.database,
                charset=config.charset,
                connect_timeout=config.connect_timeout,
                autocommit=True,
                client_flag=CLIENT.MULTI_STATEMENTS,
                cursorclass=DictCursor
            )
        except pymysql.MySQLError as e:
            code, message = _error_parts(e)
            raise DatabaseConnectionError(f"Connect failed: #{code} - {message}", e) from e
        except (ValueError, TypeError, LookupError, AttributeError) as e:
            # 驱动的参数校验错误，如未知字符集
            raise DatabaseConnectionError(f"Connect failed: {e}", e) from e

        logger.info("Database connection made")
        return self._connection

    def _execute(self, statement: str) -> Any:
        cursor = self._connection.cursor()
        try:
            cursor.execute(statement)
        except pymysql.MySQLError as e:
            cursor.close()
            code, message = _error_parts(e)
            raise DatabaseQueryError.from_native(code, message, e) from e
        self._last_result = cursor
        return cursor

    def query(self, query: str) -> Any:
        logger.debug(f"Executing Query: {query}")
        return self._execute(query)

    def multi_query(self, queries: str) -> Any:
        """执行以分号分隔的多条语句，返回定位在第一个结果集上的游标"""
        logger.debug(f"Executing Multi-query: {queries}")
        return self._execute(queries)

    def exec_procedure(self, procedure: str, args: Optional[Sequence[Any]] = None) -> List[dict]:
        """
        执行存储过程并收集所有结果集中的行

        参数通过驱动转义传入；读取中间结果集失败时记录错误并停止读取
        """
        params = _procedure_args(args)
        validate_identifier(procedure)
        logger.debug(
            f"Executing procedure against the MySQL database: CALL {procedure}"
            f"({', '.join(str(p) for p in params)})"
        )

        rows: List[dict] = []
        cursor = self._connection.cursor()
        try:
            try:
                cursor.callproc(procedure, params)
            except pymysql.MySQLError as e:
                code, message = _error_parts(e)
                raise DatabaseQueryError.from_native(code, message, e) from e

            while True:
                rows.extend(cursor.fetchall() or ())
                try:
                    if not cursor.nextset():
                        break
                except pymysql.MySQLError as e:
                    code, message = _error_parts(e)
                    logger.error(f"Store failed: ({code}) {message}")
                    break
        finally:
            try:
                cursor.close()
            except pymysql.MySQLError as e:
                logger.warning(f"Error closing procedure cursor: {e}")

        return rows

    def get_num_rows(self, result: Any = None) -> int:
        return self._resolve_result(result).rowcount

    def get_array(self, result: Any = None) -> Optional[dict]:
        return self._resolve_result(result).fetchone()

    def get_insert_id(self) -> int:
        return self._connection.insert_id()

    def perform(self, statement: str) -> Any:
        return self.query(statement)

    def close(self) -> None:
        connection, self._connection = self._connection, None
        self._last_result = None
        try:
            connection.close()
        except pymysql.MySQLError as e:
            raise DatabaseConnectionError(f"MySQL connection could not be closed: {e}", e) from e
