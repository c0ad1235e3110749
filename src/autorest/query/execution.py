"""Statement execution on a SQLAlchemy connection.

Rows are returned as plain dicts keyed by column name, in projection order.

Usage:
    with manager.connect() as conn:
        rows = fetch_all(conn, build_select_all("people", ["id", "name"]))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from autorest.core.logging import get_logger
from autorest.query.builder import SqlStatement

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult

logger = get_logger(__name__)

Row = dict[str, Any]


def _execute(conn: Connection, statement: SqlStatement) -> CursorResult[Any]:
    if statement.placeholder_count != len(statement.bound_values):
        raise RuntimeError(
            f"Statement has {statement.placeholder_count} placeholders "
            f"but {len(statement.bound_values)} bound values: {statement.text}"
        )
    logger.debug("sql_execute", sql=statement.text, params=len(statement.bound_values))
    return conn.execute(statement.as_text(), statement.params)


def fetch_all(conn: Connection, statement: SqlStatement) -> list[Row]:
    """Execute a SELECT and return every row."""
    result = _execute(conn, statement)
    return [dict(row) for row in result.mappings()]


def fetch_one(conn: Connection, statement: SqlStatement) -> Row | None:
    """Execute a SELECT and return the first row, or None."""
    result = _execute(conn, statement)
    row = result.mappings().first()
    return dict(row) if row is not None else None


def execute_insert(conn: Connection, statement: SqlStatement) -> tuple[Row | None, Any]:
    """Execute an INSERT.

    Returns:
        (returned_row, lastrowid). ``returned_row`` is set when the statement
        has a RETURNING clause; ``lastrowid`` is the driver's value otherwise
        (None where the driver does not report one).
    """
    result = _execute(conn, statement)
    if result.returns_rows:
        row = result.mappings().first()
        return (dict(row) if row is not None else None), None
    return None, getattr(result, "lastrowid", None)
