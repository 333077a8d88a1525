"""
MongoDB后端
基于 pymongo 的实现，命令以文档（或 Extended JSON 文本）形式提交给 Database.command
"""

import logging
from typing import Any, List, Mapping, Optional

from bson import json_util
from pymongo import MongoClient
from pymongo.errors import OperationFailure, PyMongoError

from .base import BackendType, DatabaseBackend
from ..config.settings import DatabaseConfig
from ..exceptions.database import DatabaseConnectionError, DatabaseQueryError

logger = logging.getLogger(__name__)


class MongoBackend(DatabaseBackend):
    """MongoDB数据库后端"""

    backend_type = BackendType.MONGODB

    def __init__(self):
        super().__init__()
        self._db = None

    @property
    def database(self) -> Any:
        """当前连接的具体数据库"""
        return self._db

    def connect(self, config: DatabaseConfig) -> Any:
        """
        建立MongoDB连接并选择数据库

        MongoClient 延迟连接，这里通过 ping 确认服务器可达且凭据有效

        Raises:
            DatabaseConnectionError: 未指定数据库名、服务器不可达或认证失败
        """
        if not config.database:
            raise DatabaseConnectionError("No database name specified")

        logger.info(f"Creating MongoDB connection to {config.host}:{config.effective_port}")
        options = {
            "host": config.host,
            "port": config.effective_port,
            "serverSelectionTimeoutMS": config.connect_timeout * 1000,
            "connectTimeoutMS": config.connect_timeout * 1000,
        }
        if config.username:
            options["username"] = config.username
            options["password"] = config.password

        client = None
        try:
            client = MongoClient(**options)
            client.admin.command("ping")
        except (PyMongoError, ValueError, TypeError) as e:
            if client is not None:
                client.close()
            raise DatabaseConnectionError(f"Connect failed: {e}", e) from e

        logger.info(f"Making connection to: {config.database}")
        self._connection = client
        self._db = client[config.database]
        return client

    def _parse_command(self, command: Any) -> Any:
        """将命令文本解析为命令文档，非JSON文本视为命令名"""
        if isinstance(command, Mapping):
            return command
        if not isinstance(command, str) or not command.strip():
            raise DatabaseQueryError(f"Invalid MongoDB command: {command!r}")
        text = command.strip()
        if not text.startswith(("{", "[")):
            return {text: 1}
        try:
            document = json_util.loads(text)
        except ValueError as e:
            raise DatabaseQueryError(f"Invalid MongoDB command document: {e}", original_error=e) from e
        if not isinstance(document, Mapping):
            raise DatabaseQueryError("MongoDB command must be a single document")
        return document

    def query(self, query: Any) -> dict:
        document = self._parse_command(query)
        logger.debug(f"Executing command: {json_util.dumps(document)}")
        try:
            reply = self._db.command(document)
        except OperationFailure as e:
            details = e.details or {}
            raise DatabaseQueryError.from_native(e.code, details.get("errmsg", str(e)), e) from e
        except PyMongoError as e:
            raise DatabaseQueryError.from_native(None, str(e), e) from e
        self._last_result = reply
        return reply

    def multi_query(self, queries: Any) -> List[dict]:
        """按顺序执行一组命令文档（JSON数组文本或文档序列），返回全部回复"""
        if isinstance(queries, str):
            try:
                queries = json_util.loads(queries)
            except ValueError as e:
                raise DatabaseQueryError(f"Invalid MongoDB command batch: {e}", original_error=e) from e
        if isinstance(queries, Mapping) or not isinstance(queries, (list, tuple)):
            raise DatabaseQueryError("MongoDB command batch must be a list of documents")

        logger.debug(f"Executing {len(queries)} MongoDB commands")
        return [self.query(command) for command in queries]

    def get_num_rows(self, result: Any = None) -> int:
        reply = self._resolve_result(result)
        cursor = reply.get("cursor")
        if isinstance(cursor, Mapping):
            return len(cursor.get("firstBatch", ()))
        return int(reply.get("n", 0))

    def get_array(self, result: Any = None) -> Optional[dict]:
        """取回复首批结果中的下一个文档，取出的文档会从批次中移除"""
        reply = self._resolve_result(result)
        cursor = reply.get("cursor")
        if not isinstance(cursor, Mapping):
            return None
        batch = cursor.get("firstBatch")
        if not batch:
            return None
        return batch.pop(0)

    def close(self) -> None:
        client, self._connection = self._connection, None
        self._db = None
        self._last_result = None
        client.close()
