"""数据库异常模块"""

from typing import Optional


class DatabaseError(Exception):
    """数据库基础异常类"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class NoConnectionError(DatabaseError):
    """没有可用的数据库连接"""

    def __init__(self, message: str = "There was no database connection found."):
        super().__init__(message)


class DatabaseConnectionError(DatabaseError):
    """数据库连接错误（凭据被拒绝或服务不可达）"""
    pass


class DatabaseQueryError(DatabaseError):
    """
    查询执行错误

    保留数据库驱动返回的原生错误码和错误信息
    """

    def __init__(self, message: str, code: Optional[int] = None,
                 native_message: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        self.code = code
        self.native_message = native_message
        super().__init__(message, original_error)

    @classmethod
    def from_native(cls, code: Optional[int], native_message: str,
                    original_error: Optional[Exception] = None) -> "DatabaseQueryError":
        """根据驱动的错误码和错误信息构造异常"""
        return cls(f"Query error: #{code} - {native_message}", code, native_message, original_error)


class QueryBuildError(DatabaseError):
    """SQL语句构建错误"""
    pass


class UnsupportedActionError(QueryBuildError):
    """不支持的查询动作"""

    def __init__(self, action: str):
        self.action = action
        super().__init__(
            "An invalid action was specified. The action must be INSERT, UPDATE, "
            f"SELECT or DELETE. {action} specified."
        )


class UnsupportedOperationError(DatabaseError):
    """当前数据库后端不支持该操作"""

    def __init__(self, backend: str, operation: str):
        self.backend = backend
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not supported by the {backend} backend")


class DatabaseConfigError(DatabaseError):
    """配置错误"""
    pass
