"""异常模块初始化文件"""

from .database import (
    DatabaseError,
    NoConnectionError,
    DatabaseConnectionError,
    DatabaseQueryError,
    QueryBuildError,
    UnsupportedActionError,
    UnsupportedOperationError,
    DatabaseConfigError
)

__all__ = [
    'DatabaseError',
    'NoConnectionError',
    'DatabaseConnectionError',
    'DatabaseQueryError',
    'QueryBuildError',
    'UnsupportedActionError',
    'UnsupportedOperationError',
    'DatabaseConfigError'
]
