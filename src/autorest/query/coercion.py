"""Coercion of raw query-string values into SQL bind values.

There is no per-column type introspection: a parameter whose name ends in
"id" is bound as an integer, everything else as a string. Textual columns
whose name happens to end in "id" are therefore coerced too.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from autorest.core.errors import InvalidArgument

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")

# BIGINT range
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

ID_SUFFIX = "id"


def parse_id(raw: str, *, name: str = "id") -> int:
    """Parse a base-10 integer literal (optional sign, digits only).

    The value must fit a signed 64-bit integer.

    Args:
        raw: Raw string value
        name: Parameter name used in the error message

    Raises:
        InvalidArgument: If ``raw`` is not an integer literal or out of range
    """
    if not isinstance(raw, str) or not _INT_LITERAL.fullmatch(raw):
        raise InvalidArgument(f"{name} must be an integer, got {raw!r}")
    sign, digits = ("-", raw[1:]) if raw[0] == "-" else ("", raw.lstrip("+"))
    digits = digits.lstrip("0") or "0"
    if len(digits) > 19:
        raise InvalidArgument(f"{name} is out of range, got {raw!r}")
    value = int(sign + digits)
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidArgument(f"{name} is out of range, got {raw!r}")
    return value


def coerce(key: str, raw: str) -> int | str:
    """Coerce a raw filter value according to its parameter name."""
    if key.endswith(ID_SUFFIX):
        return parse_id(raw, name=key)
    return raw


def filters_from_params(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Select the filter pairs from normalized query parameters.

    Only string-valued parameters become filters; repeated or structured
    parameters are dropped silently.
    """
    return [(key, value) for key, value in params.items() if isinstance(value, str)]
