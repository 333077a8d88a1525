"""
CRUD语句构建模块
将表名、列值映射和动作转换为 SELECT/INSERT/UPDATE/DELETE 语句
值会被转义后以字面量形式写入语句，过滤条件由调用方提供并原样追加在 WHERE 之后
"""

import logging
import re
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..exceptions.database import QueryBuildError, UnsupportedActionError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?")

# MySQL 字符串字面量转义
_SQL_STRING_ESCAPE = str.maketrans({"'": "''", "\\": "\\\\"})


class QueryAction(str, Enum):
    """支持的查询动作"""
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, action: Union[str, "QueryAction"]) -> "QueryAction":
        """大小写不敏感地解析动作，未知动作抛出 UnsupportedActionError"""
        if isinstance(action, cls):
            return action
        name = str(action).strip().upper()
        try:
            return cls(name)
        except ValueError:
            error = UnsupportedActionError(name)
            logger.error(error.message)
            raise error from None


def validate_identifier(name: str) -> str:
    """校验表名/列名，只允许普通标识符或 schema.table 形式"""
    if not isinstance(name, str) or not _IDENTIFIER.fullmatch(name):
        raise QueryBuildError(f"Invalid SQL identifier: {name!r}")
    return name


def render_value(value: Any) -> str:
    """
    将Python值渲染为SQL字面量

    bool 渲染为 TRUE/FALSE，数值不加引号，None 渲染为 NULL，
    日期时间使用 ISO 格式，其余值转为字符串并转义单引号和反斜杠
    """
    if value is None:
        return "NULL"
    # bool 是 int 的子类，必须先判断
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise QueryBuildError(f"Cannot render non-finite decimal {value!r} as SQL")
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise QueryBuildError(f"Cannot render non-finite float {value!r} as SQL")
        return repr(value)
    if isinstance(value, datetime):
        return f"'{value.isoformat(sep=' ')}'"
    if isinstance(value, (date, time)):
        return f"'{value.isoformat()}'"
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise QueryBuildError(f"Cannot render non UTF-8 bytes {value!r} as SQL", e) from e
    return "'" + str(value).translate(_SQL_STRING_ESCAPE) + "'"


def _columns(data: Union[Mapping[str, Any], Iterable[str]]) -> List[str]:
    if data is None:
        return []
    if isinstance(data, str):
        return [data]
    return list(data)


def _require_filter(action: QueryAction, filter: Optional[str]) -> str:
    if filter is None or not str(filter).strip():
        raise QueryBuildError(f"{action.value} requires a filter clause")
    return str(filter)


def perform(table: str,
            data: Union[Mapping[str, Any], Iterable[str]],
            action: Union[str, QueryAction] = QueryAction.INSERT,
            filter: Optional[str] = None) -> str:
    """
    构建SQL语句

    Args:
        table: 表名
        data: INSERT/UPDATE 为列到值的映射；SELECT 为列名序列（映射取其键，空则为 *）；DELETE 忽略
        action: 'select', 'insert', 'update' 或 'delete'，大小写不敏感
        filter: WHERE 子句内容，UPDATE/DELETE 必须提供，原样追加

    Returns:
        str: 构建好的SQL语句

    Raises:
        UnsupportedActionError: 动作不在四种之内
        QueryBuildError: 标识符非法、数据为空或缺少过滤条件
    """
    verb = QueryAction.parse(action)
    logger.debug("Building query")
    table = validate_identifier(table)

    if verb is QueryAction.SELECT:
        columns = [c if c == "*" else validate_identifier(c) for c in _columns(data)]
        query = f"SELECT {', '.join(columns) or '*'} FROM {table}"
        if filter is not None and str(filter).strip():
            query += f" WHERE {filter}"

    elif verb is QueryAction.INSERT:
        if not isinstance(data, Mapping) or not data:
            raise QueryBuildError("INSERT requires a non-empty column to value mapping")
        columns = ", ".join(validate_identifier(col) for col in data)
        values = ", ".join(render_value(val) for val in data.values())
        query = f"INSERT INTO {table} ({columns}) VALUES ({values})"

    elif verb is QueryAction.UPDATE:
        if not isinstance(data, Mapping) or not data:
            raise QueryBuildError("UPDATE requires a non-empty column to value mapping")
        where = _require_filter(verb, filter)
        assignments = ", ".join(
            f"{validate_identifier(col)} = {render_value(val)}" for col, val in data.items()
        )
        query = f"UPDATE {table} SET {assignments} WHERE {where}"

    else:
        where = _require_filter(verb, filter)
        query = f"DELETE FROM {table} WHERE {where}"

    logger.debug(f"Query built: {query}")
    return query
