"""Parameterized SQL statements built from catalog metadata.

Identifiers (table and column names) are interpolated into the statement
text, but only after they have been matched against the live catalog and
passed through the dialect's identifier quoting. Values coming from the
request are never interpolated: each one becomes a numbered bind marker
(``:p1``, ``:p2``, ...) with the value stored in ``bound_values``.

Usage:
    stmt = build_select_filtered("people", ["id", "name"], [("name", "Ada")])
    conn.execute(stmt.as_text(), stmt.params)
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import TextClause, text

from autorest.core.errors import InvalidArgument
from autorest.query.coercion import coerce, parse_id

QuoteFn = Callable[[str], str]

ID_COLUMN = "id"

_PLACEHOLDER = re.compile(r"(?<![\w\\]):p(\d+)\b")


def quote_identifier(name: str) -> str:
    """ANSI identifier quoting, used when no dialect is at hand."""
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class SqlStatement:
    """SQL text with numbered placeholders and the values bound to them.

    ``bound_values[i]`` is bound to placeholder ``:p{i + 1}``.
    """

    text: str
    bound_values: tuple[Any, ...] = ()

    @property
    def params(self) -> dict[str, Any]:
        """Bind parameters keyed by placeholder name."""
        return {f"p{i}": value for i, value in enumerate(self.bound_values, start=1)}

    @property
    def placeholder_count(self) -> int:
        return len(_PLACEHOLDER.findall(self.text))

    def as_text(self) -> TextClause:
        """SQLAlchemy text construct for Connection.execute()."""
        return text(self.text)


class _Renderer:
    """Renders identifiers and collects bound values for one statement."""

    def __init__(self, quote: QuoteFn, schema: str | None):
        self._quote = quote
        self._schema = schema
        self.values: list[Any] = []

    def ident(self, name: str) -> str:
        # ":" would otherwise be read as a bind marker by text()
        return self._quote(name).replace(":", "\\:")

    def table(self, name: str) -> str:
        if self._schema:
            return f"{self.ident(self._schema)}.{self.ident(name)}"
        return self.ident(name)

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f":p{len(self.values)}"

    def statement(self, sql: str) -> SqlStatement:
        return SqlStatement(text=sql, bound_values=tuple(self.values))


def _check_columns(table: str, keys: Sequence[str], columns: Sequence[str]) -> None:
    known = set(columns)
    for key in keys:
        if key not in known:
            raise InvalidArgument(f"{key!r} is not a column of {table}")


def _select(r: _Renderer, table: str, columns: Sequence[str]) -> str:
    projection = ", ".join(r.ident(c) for c in columns) if columns else "*"
    return f"SELECT {projection} FROM {r.table(table)}"


def build_select_all(
    table: str,
    columns: Sequence[str],
    *,
    quote: QuoteFn = quote_identifier,
    schema: str | None = None,
) -> SqlStatement:
    """``SELECT <columns> FROM <table>`` with no bound values."""
    r = _Renderer(quote, schema)
    return r.statement(_select(r, table, columns))


def build_select_by_id(
    table: str,
    columns: Sequence[str],
    id: str | int,
    *,
    quote: QuoteFn = quote_identifier,
    schema: str | None = None,
) -> SqlStatement:
    """``SELECT <columns> FROM <table> WHERE id = :p1``.

    Raises:
        InvalidArgument: If ``id`` is not an integer literal
    """
    key = id if isinstance(id, int) else parse_id(id)
    r = _Renderer(quote, schema)
    sql = f"{_select(r, table, columns)} WHERE {r.ident(ID_COLUMN)} = {r.bind(key)}"
    return r.statement(sql)


def build_select_filtered(
    table: str,
    columns: Sequence[str],
    filters: Sequence[tuple[str, str]],
    *,
    quote: QuoteFn = quote_identifier,
    schema: str | None = None,
) -> SqlStatement:
    """Select with ``k1 = :p1 AND k2 = :p2 ...`` in the order filters are given.

    Filter keys must be columns of the table; values are coerced by name
    (see coercion.coerce). Without filters this is build_select_all().

    Raises:
        InvalidArgument: On an unknown filter key or a value that fails coercion
    """
    _check_columns(table, [key for key, _ in filters], columns)

    r = _Renderer(quote, schema)
    sql = _select(r, table, columns)
    if filters:
        clauses = [f"{r.ident(key)} = {r.bind(coerce(key, raw))}" for key, raw in filters]
        sql = f"{sql} WHERE {' AND '.join(clauses)}"
    return r.statement(sql)


def build_insert(
    table: str,
    data: Mapping[str, Any],
    *,
    columns: Sequence[str] | None = None,
    returning: Sequence[str] | None = None,
    quote: QuoteFn = quote_identifier,
    schema: str | None = None,
) -> SqlStatement:
    """Insert one row whose column set is the keys of ``data``.

    Args:
        table: Catalog-validated table name
        data: Column name to value mapping
        columns: Catalog columns; when given, every key of ``data`` must be one
        returning: Columns for a ``RETURNING`` clause, so executing the
            statement yields the stored row including generated values

    Raises:
        InvalidArgument: On a key that is not a column of the table
    """
    if columns is not None:
        _check_columns(table, list(data), columns)

    r = _Renderer(quote, schema)
    if data:
        names = ", ".join(r.ident(key) for key in data)
        marks = ", ".join(r.bind(value) for value in data.values())
        sql = f"INSERT INTO {r.table(table)} ({names}) VALUES ({marks})"
    else:
        sql = f"INSERT INTO {r.table(table)} DEFAULT VALUES"

    if returning:
        sql = f"{sql} RETURNING {', '.join(r.ident(c) for c in returning)}"
    return r.statement(sql)
