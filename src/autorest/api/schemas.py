"""Pydantic schemas for API payloads."""

from pydantic import BaseModel


class Resource(BaseModel):
    """A table exposed as a discoverable resource."""

    name: str
    location: str


class ResourceListResponse(BaseModel):
    """Payload of the index route."""

    resources: list[Resource]


def derive_location(name: str, base_url: str) -> str:
    """URL of a resource: the base address followed by ``/<name>``."""
    return f"{base_url.rstrip('/')}/{name}"
