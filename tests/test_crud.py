"""
Tests for the SQL statement builder (services.crud.perform).
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from yoapi_plugin_dbfacade.exceptions.database import (
    QueryBuildError,
    UnsupportedActionError,
)
from yoapi_plugin_dbfacade.services.crud import QueryAction, perform, render_value


def test_insert_renders_strings_quoted_and_ints_bare() -> None:
    sql = perform("users", {"name": "Alice", "age": 30}, "INSERT")
    assert sql == "INSERT INTO users (name, age) VALUES ('Alice', 30)"


def test_insert_is_default_action() -> None:
    assert perform("users", {"age": 30}) == "INSERT INTO users (age) VALUES (30)"


def test_update_appends_filter_verbatim() -> None:
    sql = perform("users", {"age": 31}, "UPDATE", "id = 1")
    assert sql == "UPDATE users SET age = 31 WHERE id = 1"


def test_update_multiple_columns() -> None:
    sql = perform("users", {"name": "Bob", "active": False}, "update", "id = 7")
    assert sql == "UPDATE users SET name = 'Bob', active = FALSE WHERE id = 7"


def test_delete() -> None:
    assert perform("users", {}, "DELETE", "id = 3") == "DELETE FROM users WHERE id = 3"


def test_select_columns_and_filter() -> None:
    sql = perform("users", ["id", "name"], "select", "age > 18")
    assert sql == "SELECT id, name FROM users WHERE age > 18"


def test_select_without_columns_selects_all() -> None:
    assert perform("users", [], QueryAction.SELECT) == "SELECT * FROM users"


def test_select_mapping_uses_keys() -> None:
    assert perform("users", {"id": None, "name": None}, "SELECT") == "SELECT id, name FROM users"


def test_action_is_case_insensitive() -> None:
    assert perform("t", {"a": 1}, "Insert") == perform("t", {"a": 1}, "INSERT")


def test_quote_in_value_is_escaped() -> None:
    """A single quote must not terminate the literal."""
    sql = perform("people", {"name": "O'Brien"}, "INSERT")
    assert sql == "INSERT INTO people (name) VALUES ('O''Brien')"


def test_backslash_in_value_is_escaped() -> None:
    sql = perform("people", {"path": "C:\\tmp\\"}, "INSERT")
    assert sql == "INSERT INTO people (path) VALUES ('C:\\\\tmp\\\\')"


@pytest.mark.parametrize("action", ["DROP", "truncate", "", "INSERT INTO"])
def test_unsupported_action_raises(action: str) -> None:
    with pytest.raises(UnsupportedActionError):
        perform("users", {"a": 1}, action)


def test_unsupported_action_carries_action_name() -> None:
    with pytest.raises(UnsupportedActionError) as exc_info:
        perform("users", {"a": 1}, "drop")
    assert exc_info.value.action == "DROP"
    assert "DROP specified" in str(exc_info.value)


@pytest.mark.parametrize("action", ["UPDATE", "DELETE"])
@pytest.mark.parametrize("filter_clause", [None, "", "   "])
def test_update_and_delete_require_filter(action: str, filter_clause) -> None:
    with pytest.raises(QueryBuildError, match="requires a filter"):
        perform("users", {"a": 1}, action, filter_clause)


def test_insert_requires_data() -> None:
    with pytest.raises(QueryBuildError):
        perform("users", {}, "INSERT")


def test_insert_rejects_column_sequence() -> None:
    with pytest.raises(QueryBuildError):
        perform("users", ["name"], "INSERT")


@pytest.mark.parametrize("table", ["users; DROP TABLE x", "1users", "us ers", "", "users\n"])
def test_invalid_table_name_rejected(table: str) -> None:
    with pytest.raises(QueryBuildError, match="identifier"):
        perform(table, {"a": 1}, "INSERT")


def test_invalid_column_name_rejected() -> None:
    with pytest.raises(QueryBuildError, match="identifier"):
        perform("users", {"name) VALUES (1); --": "x"}, "INSERT")


def test_schema_qualified_table_allowed() -> None:
    assert perform("shop.users", ["id"], "SELECT") == "SELECT id FROM shop.users"


def test_render_value_types() -> None:
    assert render_value(True) == "TRUE"
    assert render_value(False) == "FALSE"
    assert render_value(None) == "NULL"
    assert render_value(-5) == "-5"
    assert render_value(1.5) == "1.5"
    assert render_value(Decimal("10.25")) == "10.25"
    assert render_value(date(2024, 3, 1)) == "'2024-03-01'"
    assert render_value(datetime(2024, 3, 1, 12, 30, 5)) == "'2024-03-01 12:30:05'"
    assert render_value(b"raw") == "'raw'"


def test_render_value_rejects_nan() -> None:
    with pytest.raises(QueryBuildError):
        render_value(float("nan"))


def test_trailing_newline_in_column_rejected() -> None:
    with pytest.raises(QueryBuildError, match="identifier"):
        perform("users", ["name\n"], "SELECT")


@pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity"), Decimal("sNaN")])
def test_render_value_rejects_non_finite_decimal(value: Decimal) -> None:
    with pytest.raises(QueryBuildError, match="non-finite"):
        perform("t", {"a": value}, "INSERT")


def test_render_value_rejects_invalid_utf8_bytes() -> None:
    with pytest.raises(QueryBuildError, match="UTF-8"):
        render_value(b"\xff")


@pytest.mark.parametrize("filter_clause", ["", "   "])
def test_select_ignores_blank_filter(filter_clause: str) -> None:
    assert perform("users", ["id"], "SELECT", filter_clause) == "SELECT id FROM users"
