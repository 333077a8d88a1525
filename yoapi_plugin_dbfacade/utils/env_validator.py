"""环境变量验证器，按模式读取并校验数据库相关的环境变量"""

import os
from enum import Enum
from typing import Dict, Any, Mapping, Optional

from ..exceptions.database import DatabaseConfigError


class EnvVarType(Enum):
    """环境变量类型枚举"""
    STRING = "string"
    INTEGER = "integer"
    ENUM = "enum"


class SimpleEnvValidator:
    """简化的环境变量验证器"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def validate_env_vars(self, scope: str, env_schema: Dict[str, dict]) -> Dict[str, Any]:
        """
        验证环境变量

        Args:
            scope: 调用方名称，用于错误信息
            env_schema: 环境变量模式定义

        Returns:
            验证后的环境变量字典，未设置且无默认值的可选变量不会出现在结果中

        Raises:
            DatabaseConfigError: 必需变量缺失或类型校验失败
        """
        validated_vars = {}

        for var_name, var_config in env_schema.items():
            value = self.environ.get(var_name)

            # 未设置时使用默认值
            if value is None and 'default' in var_config:
                value = var_config['default']

            if var_config.get('required', False) and value is None:
                raise DatabaseConfigError(f"[{scope}] required environment variable {var_name} is not set")

            if value is None:
                continue

            var_type = var_config.get('type', EnvVarType.STRING)
            try:
                validated_vars[var_name] = self._convert(value, var_type, var_config)
            except ValueError as e:
                raise DatabaseConfigError(f"[{scope}] environment variable {var_name} is invalid: {e}") from e

        return validated_vars

    def _convert(self, value: Any, var_type: EnvVarType, config: dict) -> Any:
        if var_type == EnvVarType.STRING:
            return str(value)
        if var_type == EnvVarType.INTEGER:
            return self._validate_integer(value, config)
        if var_type == EnvVarType.ENUM:
            return self._validate_enum(value, config)
        return value

    def _validate_integer(self, value: Any, config: dict) -> int:
        """验证整数类型环境变量"""
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"cannot convert '{value}' to int")

        min_val = config.get('min')
        max_val = config.get('max')

        if min_val is not None and number < min_val:
            raise ValueError(f"must not be less than {min_val}")

        if max_val is not None and number > max_val:
            raise ValueError(f"must not be greater than {max_val}")

        return number

    def _validate_enum(self, value: Any, config: dict) -> str:
        choices = config.get('enum', ())
        normalized = str(value).strip().lower()
        if normalized not in choices:
            raise ValueError(f"'{value}' is not one of {list(choices)}")
        return normalized


# 全局验证器实例
_env_validator = SimpleEnvValidator()


def get_env_validator() -> SimpleEnvValidator:
    """获取环境变量验证器实例"""
    return _env_validator
