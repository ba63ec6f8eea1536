"""Value classification and rendering for plan attribute trees."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, List, Tuple


class _Absent:
    """Marker for an attribute that could not be reached along a path."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


class Kind(str, Enum):
    """Runtime kinds a plan attribute value can take."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ABSENT = "absent"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNKNOWN = "unknown"


def classify(value: Any) -> Kind:
    """Return the :class:`Kind` of ``value``. Never raises."""

    if value is ABSENT:
        return Kind.ABSENT
    if value is None:
        return Kind.NULL
    if isinstance(value, str):
        return Kind.STRING
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, (int, float)):
        return Kind.NUMBER
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return Kind.SEQUENCE
    return Kind.UNKNOWN


class _Text(str):
    """Literal output queued between values while rendering."""

    __slots__ = ()


def to_string(value: Any) -> str:
    """Render ``value`` as display text, descending into nested structures.

    Strings are returned unchanged, ``None`` renders as ``null`` and
    :data:`ABSENT` as ``undefined``. Mapping keys are emitted in sorted order
    so the output is stable; values of unknown kinds render as ``""``.
    Nesting depth is unbounded: pending work is kept on an explicit stack.
    """

    parts: List[str] = []
    pending: List[Any] = [value]
    while pending:
        item = pending.pop()
        if isinstance(item, _Text):
            parts.append(item)
            continue

        kind = classify(item)
        if kind is Kind.SEQUENCE:
            parts.append("[")
            pending.append(_Text("]"))
            for position in reversed(range(len(item))):
                pending.append(item[position])
                if position:
                    pending.append(_Text(", "))
        elif kind is Kind.MAPPING:
            parts.append("{")
            pending.append(_Text("}"))
            keys = sorted(item, key=str)
            for position in reversed(range(len(keys))):
                pending.append(item[keys[position]])
                pending.append(_Text(f"{keys[position]}: "))
                if position:
                    pending.append(_Text(", "))
        else:
            parts.append(_scalar_text(item, kind))

    return "".join(parts)


def _scalar_text(value: Any, kind: Kind) -> str:
    if kind is Kind.STRING:
        return value
    if kind is Kind.BOOLEAN:
        return "true" if value else "false"
    if kind is Kind.NUMBER:
        try:
            return str(value)
        except ValueError:
            # ints past the interpreter's decimal digit limit
            return hex(value)
    if kind is Kind.NULL:
        return "null"
    if kind is Kind.ABSENT:
        return "undefined"
    return ""


def is_missing(value: Any) -> bool:
    """Return ``True`` for explicit nulls and unresolved attributes alike."""

    return value is None or value is ABSENT


def values_equal(left: Any, right: Any) -> bool:
    """Compare two values, treating different kinds as unequal."""

    pairs: List[Tuple[Any, Any]] = [(left, right)]
    while pairs:
        a, b = pairs.pop()
        kind = classify(a)
        if kind is not classify(b):
            return False

        if kind is Kind.SEQUENCE:
            if len(a) != len(b):
                return False
            pairs.extend(zip(a, b))
        elif kind is Kind.MAPPING:
            if set(a) != set(b):
                return False
            pairs.extend((a[key], b[key]) for key in a)
        elif kind is Kind.UNKNOWN:
            if a is not b:
                return False
        elif a != b:
            return False

    return True


def to_number(value: Any) -> int | float | None:
    """Coerce ``value`` to a number, or return ``None`` when that is not possible.

    Integers are returned unchanged so arbitrarily large plan values still
    compare exactly against a threshold.
    """

    kind = classify(value)
    if kind is Kind.NUMBER:
        if isinstance(value, int):
            return value
        number = float(value)
    elif kind is Kind.STRING:
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


__all__ = [
    "ABSENT",
    "Kind",
    "classify",
    "is_missing",
    "to_number",
    "to_string",
    "values_equal",
]
