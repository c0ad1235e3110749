"""Core infrastructure: configuration, logging, errors and connections."""

from autorest.core.config import Settings, get_settings
from autorest.core.connections import ConnectionConfig, ConnectionManager
from autorest.core.errors import (
    AutorestError,
    DatabaseError,
    InvalidArgument,
    MethodNotSupported,
    NotFound,
)

__all__ = [
    "Settings",
    "get_settings",
    "ConnectionConfig",
    "ConnectionManager",
    "AutorestError",
    "DatabaseError",
    "InvalidArgument",
    "MethodNotSupported",
    "NotFound",
]
