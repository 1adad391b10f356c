"""Boxed database values.

Drivers hand back a closed set of Python shapes for column values. This
module names that set and holds the single numeric normalization applied
by the default mapper.
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any

from row_orm.core.exceptions import UnsupportedTypeError
from row_orm.types.geometry import Point

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(Enum):
    """Runtime shape of a boxed database value."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    BLOB = "blob"
    TEMPORAL = "temporal"
    UUID = "uuid"
    GEOMETRY = "geometry"


# Order matters: bool is an int subclass, datetime a date subclass.
_KINDS: tuple[tuple[type | tuple[type, ...], ValueKind], ...] = (
    (bool, ValueKind.BOOLEAN),
    (int, ValueKind.INTEGER),
    (float, ValueKind.FLOAT),
    (Decimal, ValueKind.DECIMAL),
    (str, ValueKind.TEXT),
    ((bytes, bytearray, memoryview), ValueKind.BLOB),
    (
        (datetime.datetime, datetime.date, datetime.time, datetime.timedelta),
        ValueKind.TEMPORAL,
    ),
    (uuid.UUID, ValueKind.UUID),
    (Point, ValueKind.GEOMETRY),
)


def classify(value: Any, column: str | None = None) -> ValueKind:
    """Return the ValueKind of *value*.

    Raises:
        UnsupportedTypeError: If the value is not a recognised database shape.
    """
    if value is None:
        return ValueKind.NULL
    for types, kind in _KINDS:
        if isinstance(value, types):
            return kind
    raise UnsupportedTypeError(type(value), column)


def narrow_decimal(value: Decimal) -> int | Decimal:
    """Narrow a whole-number Decimal to int when it fits in 64 bits.

    Decimals with a positive scale (``Decimal("100.50")``, but also
    ``Decimal("100.00")``) are returned unchanged, as are whole numbers
    outside the signed 64-bit range. Never narrows to other widths.
    """
    if not value.is_finite():
        return value
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int) or exponent < 0:
        return value
    as_int = int(value)
    if INT64_MIN <= as_int <= INT64_MAX:
        return as_int
    return value


def normalize(value: Any, column: str | None = None) -> Any:
    """Normalize a boxed value read from a row; non-decimal shapes pass through."""
    kind = classify(value, column)
    if kind is ValueKind.DECIMAL:
        return narrow_decimal(value)
    return value
