"""Point mappers for spatial extensions."""

from __future__ import annotations

from typing import Any

from row_orm.core.exceptions import UnsupportedTypeError
from row_orm.core.params import named_placeholder
from row_orm.types.geometry import Point, is_hex_ewkb, parse_ewkt, parse_hex_ewkb
from row_orm.types.protocol import BaseTypeMapper


class WktPointMapper(BaseTypeMapper[Point]):
    """MySQL / MariaDB spatial point.

    Reads WKT text (``ST_AsText(location) AS location``), binds point text
    converted server-side with ``ST_GeomFromText``. A point with an SRID is
    written and read back in its ``SRID=n;`` prefixed form.
    """

    target_type = Point

    def load(self, value: Any) -> Point:
        if isinstance(value, Point):
            return value
        if isinstance(value, str):
            return parse_ewkt(value)
        raise UnsupportedTypeError(type(value))

    def dump(self, value: Point) -> str:
        if not isinstance(value, Point):
            raise UnsupportedTypeError(type(value))
        return value.ewkt

    def format_parameter(self, param_name: str) -> str:
        return f"ST_GeomFromText({named_placeholder(param_name)})"


class PostgisPointMapper(BaseTypeMapper[Point]):
    """PostGIS geometry point.

    Reads hex EWKB (psycopg's default for geometry columns), EWKT or WKT;
    binds EWKT cast with ``::geometry`` so the SRID survives.
    """

    target_type = Point

    def load(self, value: Any) -> Point:
        if isinstance(value, Point):
            return value
        if isinstance(value, str):
            if is_hex_ewkb(value):
                return parse_hex_ewkb(value)
            return parse_ewkt(value)
        raise UnsupportedTypeError(type(value))

    def dump(self, value: Point) -> str:
        if not isinstance(value, Point):
            raise UnsupportedTypeError(type(value))
        return value.ewkt

    def format_parameter(self, param_name: str) -> str:
        return f"({named_placeholder(param_name)})::geometry"
