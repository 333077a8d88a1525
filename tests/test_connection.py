"""
Tests for DatabaseConnectionManager: backend selection, single handle, NoConnection paths.
"""

from unittest.mock import MagicMock

import pymysql
import pytest

from yoapi_plugin_dbfacade.config.settings import DatabaseConfig
from yoapi_plugin_dbfacade.core.base import BackendType
from yoapi_plugin_dbfacade.core.connection import DatabaseConnectionManager
from yoapi_plugin_dbfacade.core.mongo import MongoBackend
from yoapi_plugin_dbfacade.core.mysql import MySQLBackend
from yoapi_plugin_dbfacade.exceptions.database import (
    DatabaseConfigError,
    DatabaseConnectionError,
    NoConnectionError,
)


def test_new_manager_has_no_connection() -> None:
    manager = DatabaseConnectionManager()

    assert manager.is_connected is False
    with pytest.raises(NoConnectionError):
        manager.get_connection()
    with pytest.raises(NoConnectionError):
        manager.backend


def test_init_mysql_from_config(mysql_connect: MagicMock, mysql_config: DatabaseConfig) -> None:
    manager = DatabaseConnectionManager()

    conn = manager.init(mysql_config)

    assert conn is mysql_connect.return_value
    assert manager.get_connection() is conn
    assert isinstance(manager.backend, MySQLBackend)


def test_init_from_mapping_with_aliases(mysql_connect: MagicMock) -> None:
    manager = DatabaseConnectionManager()

    manager.init({"user": "app", "password": "pw", "name": "shop", "port": "3307"})

    kwargs = mysql_connect.call_args.kwargs
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 3307
    assert kwargs["user"] == "app"
    assert kwargs["database"] == "shop"


def test_backend_type_argument_overrides_config(mongo_client: MagicMock, mysql_config: DatabaseConfig) -> None:
    manager = DatabaseConnectionManager()

    manager.init(mysql_config, "MongoDB")

    assert isinstance(manager.backend, MongoBackend)
    assert manager.backend.backend_type is BackendType.MONGODB
    assert mongo_client.call_args.kwargs["port"] == 27017


def test_unknown_backend_type(mysql_config: DatabaseConfig) -> None:
    manager = DatabaseConnectionManager()

    with pytest.raises(DatabaseConfigError, match="Unsupported database type"):
        manager.init(mysql_config, "oracle")

    assert manager.is_connected is False


def test_connect_failure_propagates_and_leaves_no_handle(
    mysql_connect: MagicMock, mysql_config: DatabaseConfig
) -> None:
    mysql_connect.side_effect = pymysql.err.OperationalError(2003, "Can't connect to MySQL server on 'db.local'")
    manager = DatabaseConnectionManager()

    with pytest.raises(DatabaseConnectionError):
        manager.init(mysql_config)

    assert manager.is_connected is False
    with pytest.raises(NoConnectionError):
        manager.get_connection()


def test_reinit_closes_previous_connection(mysql_connect: MagicMock, mysql_config: DatabaseConfig) -> None:
    first, second = MagicMock(name="first"), MagicMock(name="second")
    mysql_connect.side_effect = [first, second]
    manager = DatabaseConnectionManager()

    manager.init(mysql_config)
    manager.init(mysql_config)

    first.close.assert_called_once()
    assert manager.get_connection() is second


def test_close_twice_fails_second_time(mysql_connect: MagicMock, mysql_config: DatabaseConfig) -> None:
    manager = DatabaseConnectionManager()
    manager.init(mysql_config)

    manager.close()

    mysql_connect.return_value.close.assert_called_once()
    with pytest.raises(NoConnectionError):
        manager.close()


def test_close_before_init_fails() -> None:
    with pytest.raises(NoConnectionError):
        DatabaseConnectionManager().close()


def test_context_manager_closes(mysql_connect: MagicMock, mysql_config: DatabaseConfig) -> None:
    with DatabaseConnectionManager() as manager:
        manager.init(mysql_config)

    assert manager.is_connected is False
    mysql_connect.return_value.close.assert_called_once()


def test_context_manager_without_connection_is_quiet() -> None:
    with DatabaseConnectionManager() as manager:
        pass

    assert manager.is_connected is False
