"""Schema discovery against the live database."""

from autorest.schema.catalog import SchemaCatalog

__all__ = ["SchemaCatalog"]
