"""数据库配置设置模块"""

import os
import logging
from typing import Dict, Any, Mapping, Optional
from dataclasses import dataclass

from dotenv import load_dotenv

from ..exceptions.database import DatabaseConfigError
from ..utils.env_validator import SimpleEnvValidator, get_env_validator, EnvVarType

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    "mysql": 3306,
    "mongodb": 27017,
}

# 映射形式凭据中允许的字段别名
_CREDENTIAL_ALIASES = {
    "user": "username",
    "name": "database",
    "database_name": "database",
    "db": "database",
    "type": "backend",
}


def _bounded_int(name: str, value: Any, minimum: int, maximum: Optional[int] = None) -> int:
    """把配置值转换为整数并检查取值范围"""
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise DatabaseConfigError(f"Invalid database {name}: {value!r}", e) from e
    if isinstance(value, bool) or number < minimum or (maximum is not None and number > maximum):
        raise DatabaseConfigError(f"Invalid database {name}: {value!r}")
    return number


@dataclass
class DatabaseConfig:
    """数据库连接凭据，仅在建立连接时使用一次"""
    username: str
    password: str
    database: str
    host: str = "localhost"
    port: Optional[int] = None
    backend: str = "mysql"
    charset: str = "utf8mb4"
    connect_timeout: int = 10

    def __post_init__(self):
        if self.port is not None:
            self.port = _bounded_int("port", self.port, 1, 65535)
        self.connect_timeout = _bounded_int("connect timeout", self.connect_timeout, 1)
        if not isinstance(self.charset, str) or not self.charset.strip():
            raise DatabaseConfigError(f"Invalid database charset: {self.charset!r}")

    @property
    def default_port(self) -> Optional[int]:
        return DEFAULT_PORTS.get(self.backend)

    @property
    def effective_port(self) -> Optional[int]:
        """未指定端口时使用后端默认端口"""
        return self.port if self.port is not None else self.default_port

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(backend={self.backend!r}, host={self.host!r}, "
            f"port={self.effective_port!r}, username={self.username!r}, database={self.database!r})"
        )

    @classmethod
    def from_mapping(cls, credentials: Mapping[str, Any]) -> "DatabaseConfig":
        """
        从字典形式的凭据构造配置

        Args:
            credentials: 包含 host, username, password, database, port 等键的映射

        Raises:
            DatabaseConfigError: 缺少必需字段
        """
        values: Dict[str, Any] = {}
        for key, value in credentials.items():
            field = _CREDENTIAL_ALIASES.get(key, key)
            if field in cls.__dataclass_fields__:
                values.setdefault(field, value)

        missing = [name for name in ("username", "database") if values.get(name) is None]
        if missing:
            raise DatabaseConfigError(f"Database credentials must provide {', '.join(missing)}")

        if values.get("password") is None:
            values["password"] = ""
        if values.get("host") is None:
            values.pop("host", None)
        if values.get("backend") is not None:
            values["backend"] = str(getattr(values["backend"], "value", values["backend"])).lower()
        else:
            values.pop("backend", None)

        return cls(**values)


class DatabaseConfigManager:
    """数据库配置管理器，从 .env 文件和环境变量加载配置"""

    def __init__(self, env_file: Optional[str] = None,
                 validator: Optional[SimpleEnvValidator] = None):
        self.validator = validator or get_env_validator()
        self.env_file = env_file
        self._default_config: Optional[DatabaseConfig] = None

        if env_file is not None:
            if os.path.exists(env_file):
                load_dotenv(env_file)
                logger.debug(f"Loaded environment from {env_file}")
            else:
                logger.warning(f"Environment file {env_file} not found, using process environment")

    def get_env_schema(self, prefix: str = "DATABASE_") -> Dict[str, Any]:
        """获取环境变量验证模式"""
        return {
            f"{prefix}TYPE": {
                "type": EnvVarType.ENUM,
                "required": False,
                "default": "mysql",
                "enum": tuple(DEFAULT_PORTS),
                "description": "数据库类型"
            },
            f"{prefix}HOST": {
                "type": EnvVarType.STRING,
                "required": False,
                "default": "localhost",
                "description": "数据库主机地址"
            },
            f"{prefix}PORT": {
                "type": EnvVarType.INTEGER,
                "required": False,
                "min": 1,
                "max": 65535,
                "description": "数据库端口，未设置时使用后端默认端口"
            },
            f"{prefix}USER": {
                "type": EnvVarType.STRING,
                "required": True,
                "description": "数据库用户名"
            },
            f"{prefix}PASSWORD": {
                "type": EnvVarType.STRING,
                "required": True,
                "description": "数据库密码"
            },
            f"{prefix}NAME": {
                "type": EnvVarType.STRING,
                "required": True,
                "description": "数据库名称"
            },
            f"{prefix}CHARSET": {
                "type": EnvVarType.STRING,
                "required": False,
                "default": "utf8mb4",
                "description": "MySQL连接字符集"
            },
            f"{prefix}CONNECT_TIMEOUT": {
                "type": EnvVarType.INTEGER,
                "required": False,
                "default": 10,
                "min": 1,
                "description": "连接超时时间（秒）"
            }
        }

    def load_config(self, prefix: str = "DATABASE_") -> DatabaseConfig:
        """加载数据库配置"""
        env_schema = self.get_env_schema(prefix)
        env_vars = self.validator.validate_env_vars("dbfacade", env_schema)

        return DatabaseConfig(
            backend=env_vars[f"{prefix}TYPE"],
            host=env_vars[f"{prefix}HOST"],
            port=env_vars.get(f"{prefix}PORT"),
            username=env_vars[f"{prefix}USER"],
            password=env_vars[f"{prefix}PASSWORD"],
            database=env_vars[f"{prefix}NAME"],
            charset=env_vars[f"{prefix}CHARSET"],
            connect_timeout=env_vars[f"{prefix}CONNECT_TIMEOUT"]
        )

    def get_default_config(self) -> DatabaseConfig:
        """获取默认数据库配置"""
        if self._default_config is None:
            self._default_config = self.load_config()
        return self._default_config
