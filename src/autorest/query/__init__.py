"""SQL statement construction, value coercion and execution."""

from autorest.query.builder import (
    SqlStatement,
    build_insert,
    build_select_all,
    build_select_by_id,
    build_select_filtered,
    quote_identifier,
)
from autorest.query.coercion import coerce, filters_from_params, parse_id
from autorest.query.execution import execute_insert, fetch_all, fetch_one

__all__ = [
    "SqlStatement",
    "build_insert",
    "build_select_all",
    "build_select_by_id",
    "build_select_filtered",
    "quote_identifier",
    "coerce",
    "filters_from_params",
    "parse_id",
    "execute_insert",
    "fetch_all",
    "fetch_one",
]
