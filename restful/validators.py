"""Primitive predicates and transforms for request parameters.

Request values mostly arrive as strings (path and query parameters, form
fields). JSON bodies can also carry native ``int`` and ``bool`` values, which
the predicates accept as well.
"""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any

_INT_PATTERN = re.compile(r"^[-+]?[0-9]+$")
_INT_NO_LEADING_ZEROES_PATTERN = re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$")
_BOOLEAN_LITERALS = frozenset({"true", "false", "1", "0"})
_FALSE_LITERALS = frozenset({"0", "false", ""})
_STRICT_TRUE_LITERALS = frozenset({"1", "true"})


def _as_int(value: Any, allow_leading_zeroes: bool = True) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    pattern = _INT_PATTERN if allow_leading_zeroes else _INT_NO_LEADING_ZEROES_PATTERN
    if isinstance(value, str) and pattern.fullmatch(value):
        return int(value)
    return None


def is_int(value: Any, options: Mapping[str, Any] | None = None) -> bool:
    """Return whether ``value`` is an integer literal within optional ``min``/``max`` bounds.

    Leading zeroes are accepted unless ``allow_leading_zeroes`` is false.
    """
    allow_leading_zeroes = options.get("allow_leading_zeroes", True) if options else True
    number = _as_int(value, allow_leading_zeroes)
    if number is None:
        return False
    if not options:
        return True
    minimum = options.get("min")
    maximum = options.get("max")
    if minimum is not None and number < minimum:
        return False
    if maximum is not None and number > maximum:
        return False
    return True


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value in _BOOLEAN_LITERALS


def to_boolean(value: Any, strict: bool = False) -> bool:
    """Convert a boolean literal.

    Loose mode treats everything except ``"0"``, ``"false"`` and ``""`` as
    true; strict mode only accepts ``"1"`` and ``"true"``.
    """
    if isinstance(value, bool):
        return value
    text = str(value)
    if strict:
        return text in _STRICT_TRUE_LITERALS
    return text not in _FALSE_LITERALS


def to_int(value: Any, radix: int = 10) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(str(value), radix)
