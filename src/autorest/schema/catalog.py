"""Live schema discovery.

Every call inspects the database again: nothing is cached, so the API always
reflects the current set of tables, views and columns.
"""

from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.exc import NoSuchTableError

from autorest.core.connections import ConnectionManager
from autorest.core.logging import get_logger

logger = get_logger(__name__)


class SchemaCatalog:
    """Reads table and column names from the database metadata.

    Table names returned here are the only ones ever interpolated into SQL
    text; see table_exists().
    """

    def __init__(self, manager: ConnectionManager, schema: str | None = None):
        self._manager = manager
        self._schema = schema

    @property
    def schema(self) -> str | None:
        return self._schema

    def list_tables(self) -> list[str]:
        """List all table and view names of the configured schema.

        Raises:
            DatabaseError: If the connection or the metadata query fails
        """
        with self._manager.connect() as conn:
            inspector = inspect(conn)
            tables = inspector.get_table_names(schema=self._schema)
            tables += inspector.get_view_names(schema=self._schema)
        logger.debug("tables_listed", count=len(tables), schema=self._schema)
        return tables

    def list_columns(self, table: str) -> list[str]:
        """List column names of one table in catalog order.

        Returns an empty list if the table does not exist.

        Raises:
            DatabaseError: If the connection or the metadata query fails
        """
        with self._manager.connect() as conn:
            try:
                columns = inspect(conn).get_columns(table, schema=self._schema)
            except NoSuchTableError:
                return []
        return [column["name"] for column in columns]

    def table_exists(self, table: str) -> bool:
        """Check that ``table`` is exactly one of list_tables()."""
        return table in self.list_tables()
