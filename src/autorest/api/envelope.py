"""Uniform response envelope.

Every JSON body has the shape ``{"result": payload, "status": code}`` or
``{"error": payload, "status": code}``; the status alone decides which.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from autorest.core.errors import AutorestError


class EnvelopeKind(str, Enum):
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class Envelope:
    status: int
    kind: EnvelopeKind
    payload: Any

    @property
    def body(self) -> dict[str, Any]:
        return {self.kind.value: self.payload, "status": self.status}


def wrap(status: int, payload: Any = "") -> Envelope:
    """Wrap a payload: statuses below 400 are results, the rest errors."""
    kind = EnvelopeKind.RESULT if status < 400 else EnvelopeKind.ERROR
    return Envelope(status=status, kind=kind, payload=payload)


def from_error(error: AutorestError) -> Envelope:
    """Envelope for a taxonomy error, using its status and message."""
    return wrap(error.status, error.message)


def render(envelope: Envelope, headers: Mapping[str, str] | None = None) -> JSONResponse:
    """Serialize an envelope as an application/json response.

    Row values such as dates, decimals and UUIDs go through jsonable_encoder.
    """
    return JSONResponse(
        content=jsonable_encoder(envelope.body),
        status_code=envelope.status,
        headers=headers,
    )
