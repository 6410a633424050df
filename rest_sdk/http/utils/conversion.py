from datetime import date, datetime, time
from enum import Enum
from typing import Any

SEQUENCE_SEPARATOR = ","


def to_invariant_string(value: Any) -> str:
    """Convert a value to a locale-independent string.

    Args:
        value: The value to convert.

    Returns:
        The string form: booleans as `true`/`false`, enums by value, dates in
        ISO 8601, bytes decoded as UTF-8, everything else through `str()`.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return to_invariant_string(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def to_parameter_string(value: Any) -> str:
    """Convert a value to a request parameter value, joining sequences with commas."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return SEQUENCE_SEPARATOR.join(to_invariant_string(e) for e in value)
    return to_invariant_string(value)
