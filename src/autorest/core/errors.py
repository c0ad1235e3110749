"""Error taxonomy shared by the catalog, the query builder and the dispatcher.

Each error carries the HTTP status it is answered with, so the dispatcher
only has to wrap ``(error.status, error.message)`` into an envelope.
"""

from __future__ import annotations


class AutorestError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status: int = 500

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class NotFound(AutorestError):
    """Requested table or row does not exist."""

    status = 404


class InvalidArgument(AutorestError, ValueError):
    """Malformed id, filter value, filter key or request body."""

    status = 400


class MethodNotSupported(AutorestError):
    """The route exists but does not handle the HTTP method.

    Table routes answer 405; the index answers 501.
    """

    status = 405


class DatabaseError(AutorestError):
    """Connectivity or query execution failure reported by the driver."""

    status = 503

    @classmethod
    def from_exception(cls, exc: Exception) -> DatabaseError:
        """Build from a SQLAlchemy/DBAPI exception, keeping the driver message."""
        orig = getattr(exc, "orig", None)
        message = str(orig) if orig is not None else str(exc)
        return cls(message.strip() or exc.__class__.__name__)


__all__ = [
    "AutorestError",
    "NotFound",
    "InvalidArgument",
    "MethodNotSupported",
    "DatabaseError",
]
