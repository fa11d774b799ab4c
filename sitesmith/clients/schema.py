"""Typed accessors for GitHub response bodies.

Every resource client parses through these so that a body with the wrong
shape surfaces as ParseError instead of a KeyError deep in the workflow.
"""

from typing import Any, TypeVar

from sitesmith.exceptions import ParseError

T = TypeVar("T")


def expect_object(data: Any, endpoint: str) -> dict[str, Any]:
    """Return ``data`` if it is a JSON object, else raise ParseError."""
    if not isinstance(data, dict):
        raise ParseError(f"expected an object, got {type(data).__name__}", endpoint)
    return data


def expect_list(data: Any, endpoint: str) -> list[Any]:
    """Return ``data`` if it is a JSON array, else raise ParseError."""
    if not isinstance(data, list):
        raise ParseError(f"expected an array, got {type(data).__name__}", endpoint)
    return data


def require(data: dict[str, Any], key: str, kind: type[T], endpoint: str) -> T:
    """Fetch a mandatory field of the given type."""
    value = data.get(key)
    if value is None:
        raise ParseError(f"missing field '{key}'", endpoint)
    # bool is a subclass of int; keep them apart
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ParseError(
            f"field '{key}' should be {kind.__name__}, got {type(value).__name__}", endpoint
        )
    return value


def optional(data: dict[str, Any], key: str, kind: type[T], endpoint: str, default: Any = None) -> Any:
    """Fetch an optional field, validating its type when present."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise ParseError(
            f"field '{key}' should be {kind.__name__}, got {type(value).__name__}", endpoint
        )
    return value
