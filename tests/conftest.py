from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from yoapi_plugin_dbfacade.config.settings import DatabaseConfig


@pytest.fixture
def mysql_config() -> DatabaseConfig:
    return DatabaseConfig(
        username="app",
        password="secret",
        database="shop",
        host="db.local",
    )


@pytest.fixture
def mongo_config() -> DatabaseConfig:
    return DatabaseConfig(
        username="app",
        password="secret",
        database="shop",
        backend="mongodb",
    )


@pytest.fixture
def mysql_connect() -> Iterator[MagicMock]:
    """Patch pymysql.connect; the returned mock's return_value is the fake connection."""
    with patch("yoapi_plugin_dbfacade.core.mysql.pymysql.connect") as connect:
        connect.return_value = MagicMock(name="mysql_connection")
        yield connect


@pytest.fixture
def mongo_client() -> Iterator[MagicMock]:
    """Patch MongoClient; the returned mock's return_value is the fake client."""
    with patch("yoapi_plugin_dbfacade.core.mongo.MongoClient") as client_cls:
        client = MagicMock(name="mongo_client")
        client.__getitem__.return_value = MagicMock(name="mongo_db")
        client_cls.return_value = client
        yield client_cls
