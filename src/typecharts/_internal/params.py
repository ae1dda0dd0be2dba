"""Query string encoding for PostHog GET endpoints.

PostHog's legacy insight endpoints take their whole payload as query
parameters, with nested structures JSON-encoded into single values.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import quote

# Characters left unescaped, matching JavaScript's encodeURIComponent
_SAFE_CHARS = "-_.!~*'()"


def _serialize(value: Any) -> str:
    """Render a single value as the text to be percent-encoded."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict | list | tuple):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def encode_value(value: Any) -> str:
    """Serialize and percent-encode a single parameter value.

    Args:
        value: String, number, boolean, or JSON-serializable structure.

    Returns:
        Percent-encoded value.

    Raises:
        ValueError: If value contains a circular reference.
    """
    return quote(_serialize(value), safe=_SAFE_CHARS)


def _pairs(
    params: Mapping[str, Any], explode_arrays: bool
) -> Iterator[tuple[str, Any]]:
    for key, value in params.items():
        if value is None:
            continue
        if explode_arrays and isinstance(value, list | tuple):
            for item in value:
                if item is not None:
                    yield key, item
        else:
            yield key, value


def to_params(params: Mapping[str, Any], explode_arrays: bool = False) -> str:
    """Encode a mapping as a URL query string.

    Keys with None values are dropped. Arrays are either JSON-encoded as a
    single value or, with explode_arrays, emitted once per element::

        to_params({"a": [1, 2]})                       # a=%5B1%2C2%5D
        to_params({"a": [1, 2]}, explode_arrays=True)  # a=1&a=2

    Args:
        params: Parameters in the order they should appear.
        explode_arrays: Emit one pair per element for list values.

    Returns:
        ``key=value`` pairs joined with ``&``.

    Raises:
        ValueError: If a value contains a circular reference.
    """
    if not params:
        return ""
    return "&".join(
        f"{key}={encode_value(value)}" for key, value in _pairs(params, explode_arrays)
    )
