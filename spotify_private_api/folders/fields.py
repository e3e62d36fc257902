"""
Helpers for reading fields out of decoded JSON documents.

Server documents are plain dicts. These helpers check presence and type
of a field and raise the caller's ParseError subclass with the dotted
path of the offending field, so that a bad document is rejected with
a message that points at the problem.
"""

import copy
from typing import Any, Mapping

from spotify_private_api.core.exceptions import ParseError

_MISSING = object()


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _check_type(
    value: Any,
    expected: type | tuple[type, ...],
    path: str,
    error: type[ParseError]
) -> Any:
    allowed = expected if isinstance(expected, tuple) else (expected,)
    # True is an int in Python; only accept it where bool is expected
    if not isinstance(value, allowed) or (isinstance(value, bool) and bool not in allowed):
        raise error(
            f"Field '{path}' must be {_type_names(expected)}, got {type(value).__name__}",
            details={"field": path}
        )
    return value


def require_mapping(document: Any, path: str, error: type[ParseError]) -> Mapping[str, Any]:
    """Ensure a (sub)document is a JSON object."""
    return _check_type(document, dict, path, error)


def require(
    document: Mapping[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    path: str,
    error: type[ParseError]
) -> Any:
    """Return document[key], raising `error` if it is absent or of the wrong type."""
    value = document.get(key, _MISSING)
    full_path = f"{path}.{key}" if path else key
    if value is _MISSING:
        raise error(f"Missing required field '{full_path}'", details={"field": full_path})
    return _check_type(value, expected, full_path, error)


def optional(
    document: Mapping[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    path: str,
    error: type[ParseError]
) -> Any:
    """Return document[key] or None when absent (or null); type-check otherwise."""
    value = document.get(key)
    if value is None:
        return None
    full_path = f"{path}.{key}" if path else key
    return _check_type(value, expected, full_path, error)


def extra_fields(document: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    """Collect (copies of) the keys this library does not model, to be written back verbatim."""
    return {key: copy.deepcopy(value) for key, value in document.items() if key not in known}


def put_optional(target: dict[str, Any], key: str, value: Any) -> None:
    """Set target[key] only when the value was present on read."""
    if value is not None:
        target[key] = copy.deepcopy(value)


def put_extra(target: dict[str, Any], extra: Mapping[str, Any]) -> None:
    """Write unmodelled keys back, copied so the caller cannot reach into a model."""
    target.update(copy.deepcopy(dict(extra)))


def opaque(
    document: Mapping[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    path: str,
    error: type[ParseError]
) -> Any:
    """Like optional(), but returns a private deep copy of a container value."""
    return copy.deepcopy(optional(document, key, expected, path, error))
