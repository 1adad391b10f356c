"""Point geometry value and its textual/binary grammars.

Supports the three representations drivers hand back for spatial columns:

    WKT     POINT(1.5 -2)
    EWKT    SRID=4326;POINT(1.5 -2)
    EWKB    0101000020E6100000...   (hex, as returned by psycopg for PostGIS)
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass

from row_orm.core.exceptions import ConversionError, MalformedLiteralError

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"

_WKT_POINT_PATTERN = re.compile(
    rf"^\s*POINT\s*\(\s*(?P<x>{_NUMBER})\s+(?P<y>{_NUMBER})\s*\)\s*$",
    re.IGNORECASE,
)
_SRID_PREFIX_PATTERN = re.compile(r"^\s*SRID=(?P<srid>\d+)\s*;(?P<rest>.*)$", re.IGNORECASE | re.DOTALL)
_HEX_PATTERN = re.compile(r"^(?:[0-9a-fA-F]{2})+$")

_WKB_POINT = 1
_EWKB_SRID_FLAG = 0x20000000
_EWKB_Z_FLAG = 0x80000000
_EWKB_M_FLAG = 0x40000000


@dataclass(frozen=True)
class Point:
    """A 2D point with an optional spatial reference id."""

    x: float
    y: float
    srid: int | None = None

    def __post_init__(self) -> None:
        # WKT has no spelling for inf or nan
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ConversionError(
                None, Point, f"non-finite coordinate in ({self.x!r}, {self.y!r})"
            )

    @property
    def wkt(self) -> str:
        """Well-known text, without the SRID."""
        return f"POINT({_format_coordinate(self.x)} {_format_coordinate(self.y)})"

    @property
    def ewkt(self) -> str:
        """Extended well-known text (PostGIS), SRID-prefixed when known."""
        if self.srid is None:
            return self.wkt
        return f"SRID={self.srid};{self.wkt}"

    def __str__(self) -> str:
        return self.ewkt


def _format_coordinate(value: float) -> str:
    # shortest round-tripping form; integral values print without ".0"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def parse_wkt(literal: str) -> Point:
    """Parse a WKT point, raising MalformedLiteralError on any deviation."""
    match = _WKT_POINT_PATTERN.match(literal)
    if match is None:
        raise MalformedLiteralError(literal, "WKT point")
    try:
        return Point(float(match.group("x")), float(match.group("y")))
    except ConversionError as e:
        raise MalformedLiteralError(literal, "WKT point") from e


def parse_ewkt(literal: str) -> Point:
    """Parse an EWKT point; a bare WKT point is accepted with no SRID."""
    prefix = _SRID_PREFIX_PATTERN.match(literal)
    if prefix is None:
        return parse_wkt(literal)
    try:
        point = parse_wkt(prefix.group("rest"))
    except MalformedLiteralError as e:
        raise MalformedLiteralError(literal, "EWKT point") from e
    return Point(point.x, point.y, int(prefix.group("srid")))


def is_hex_ewkb(literal: str) -> bool:
    """True if the string looks like hex-encoded (E)WKB."""
    return len(literal) >= 42 and _HEX_PATTERN.match(literal) is not None


def parse_hex_ewkb(literal: str) -> Point:
    """Decode a hex (E)WKB point. Z and M ordinates are read and dropped."""
    try:
        data = bytes.fromhex(literal)
        order = "<" if data[0] == 1 else ">"
        (geom_type,) = struct.unpack_from(f"{order}I", data, 1)
        offset = 5
        srid = None
        if geom_type & _EWKB_SRID_FLAG:
            (srid,) = struct.unpack_from(f"{order}I", data, offset)
            offset += 4
        if geom_type & 0xFFFF != _WKB_POINT:
            raise MalformedLiteralError(literal, "EWKB point")
        ordinates = 2 + bool(geom_type & _EWKB_Z_FLAG) + bool(geom_type & _EWKB_M_FLAG)
        values = struct.unpack_from(f"{order}{ordinates}d", data, offset)
        if offset + 8 * ordinates != len(data):
            raise MalformedLiteralError(literal, "EWKB point")
    except (ValueError, IndexError, struct.error) as e:
        raise MalformedLiteralError(literal, "EWKB point") from e
    try:
        return Point(values[0], values[1], srid)
    except ConversionError as e:
        raise MalformedLiteralError(literal, "EWKB point") from e
