"""API routers."""

from autorest.api.routers import resources

__all__ = [
    "resources",
]
