"""Unit tests for Point grammars and the spatial point mappers."""

from __future__ import annotations

import struct

import pytest

from row_orm.core.exceptions import ConversionError, MalformedLiteralError, UnsupportedTypeError
from row_orm.dialects.spatial import PostgisPointMapper, WktPointMapper
from row_orm.types.geometry import Point, is_hex_ewkb, parse_ewkt, parse_hex_ewkb, parse_wkt


def _ewkb(x: float, y: float, srid: int | None = None, little_endian: bool = True) -> str:
    order = "<" if little_endian else ">"
    geom_type = 1 | (0x20000000 if srid is not None else 0)
    head = struct.pack(f"{order}BI", 1 if little_endian else 0, geom_type)
    srid_part = struct.pack(f"{order}I", srid) if srid is not None else b""
    return (head + srid_part + struct.pack(f"{order}dd", x, y)).hex().upper()


class TestPoint:
    def test_wkt(self) -> None:
        assert Point(1.5, -2).wkt == "POINT(1.5 -2)"

    def test_ewkt_with_srid(self) -> None:
        assert Point(1, 2, 4326).ewkt == "SRID=4326;POINT(1 2)"

    def test_ewkt_without_srid_is_wkt(self) -> None:
        assert Point(1, 2).ewkt == "POINT(1 2)"

    def test_immutable(self) -> None:
        point = Point(1, 2)
        with pytest.raises(AttributeError):
            point.x = 3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "x, y", [(float("inf"), 0.0), (0.0, float("-inf")), (float("nan"), 1.0)]
    )
    def test_non_finite_rejected(self, x: float, y: float) -> None:
        with pytest.raises(ConversionError) as exc_info:
            Point(x, y)
        assert exc_info.value.target_type is Point


class TestParseWkt:
    def test_parse(self) -> None:
        assert parse_wkt("POINT(30 10)") == Point(30.0, 10.0)

    def test_case_and_spacing(self) -> None:
        assert parse_wkt("  point ( -1.25   3e2 ) ") == Point(-1.25, 300.0)

    @pytest.mark.parametrize(
        "literal",
        ["NOT-A-POINT", "POINT(1)", "POINT(1 2 3)", "LINESTRING(0 0, 1 1)", "POINT(a b)", ""],
    )
    def test_malformed(self, literal: str) -> None:
        with pytest.raises(MalformedLiteralError) as exc_info:
            parse_wkt(literal)
        assert exc_info.value.literal == literal

    def test_malformed_is_conversion_error(self) -> None:
        with pytest.raises(ConversionError):
            parse_wkt("NOT-A-POINT")

    def test_overflowing_coordinate(self) -> None:
        with pytest.raises(MalformedLiteralError) as exc_info:
            parse_wkt("POINT(1e999 0)")
        assert isinstance(exc_info.value.__cause__, ConversionError)


class TestParseEwkt:
    def test_srid_prefix(self) -> None:
        assert parse_ewkt("SRID=4326;POINT(1 2)") == Point(1.0, 2.0, 4326)

    def test_bare_wkt(self) -> None:
        assert parse_ewkt("POINT(1 2)") == Point(1.0, 2.0)

    def test_bad_body(self) -> None:
        with pytest.raises(MalformedLiteralError) as exc_info:
            parse_ewkt("SRID=4326;NOT-A-POINT")
        assert exc_info.value.grammar == "EWKT point"


class TestParseHexEwkb:
    def test_with_srid(self) -> None:
        assert parse_hex_ewkb(_ewkb(1.5, -2.0, 4326)) == Point(1.5, -2.0, 4326)

    def test_plain_wkb(self) -> None:
        literal = _ewkb(3.0, 4.0)
        assert is_hex_ewkb(literal)
        assert parse_hex_ewkb(literal) == Point(3.0, 4.0)

    def test_big_endian(self) -> None:
        assert parse_hex_ewkb(_ewkb(5.0, 6.0, 3857, little_endian=False)) == Point(5.0, 6.0, 3857)

    def test_truncated(self) -> None:
        with pytest.raises(MalformedLiteralError):
            parse_hex_ewkb(_ewkb(1.0, 2.0, 4326)[:-4])

    def test_nan_coordinate(self) -> None:
        with pytest.raises(MalformedLiteralError):
            parse_hex_ewkb(_ewkb(float("nan"), 2.0, 4326))

    def test_not_a_point(self) -> None:
        linestring = struct.pack("<BIdd", 1, 2, 0.0, 0.0).hex()
        with pytest.raises(MalformedLiteralError):
            parse_hex_ewkb(linestring)

    def test_wkt_is_not_hex(self) -> None:
        assert not is_hex_ewkb("POINT(1 2)")


class TestWktPointMapper:
    mapper = WktPointMapper()

    def test_map_wkt(self) -> None:
        assert self.mapper.map({"location": "POINT(1 2)"}, "location") == Point(1.0, 2.0)

    def test_map_native_point(self) -> None:
        point = Point(1, 2)
        assert self.mapper.map({"location": point}, "location") is point

    def test_map_null(self) -> None:
        assert self.mapper.map({"location": None}, "location") is None

    def test_malformed_names_column(self) -> None:
        with pytest.raises(MalformedLiteralError) as exc_info:
            self.mapper.map({"location": "NOT-A-POINT"}, "location")
        assert exc_info.value.column == "location"
        assert "location" in str(exc_info.value)

    def test_unsupported_shape(self) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            self.mapper.map({"location": 42}, "location")
        assert exc_info.value.column == "location"

    def test_to_database(self) -> None:
        assert self.mapper.to_database(Point(1, 2)) == "POINT(1 2)"
        assert self.mapper.to_database(None) is None

    def test_format_parameter(self) -> None:
        assert self.mapper.format_parameter("location") == "ST_GeomFromText(:location)"

    @pytest.mark.parametrize(
        "point",
        [
            Point(0, 0),
            Point(1.5, -2.25),
            Point(-73.985428, 40.748817),
            Point(0.1, 1e-7),
            Point(1, 2, 4326),
            Point(-73.985428, 40.748817, 3857),
        ],
    )
    def test_round_trip(self, point: Point) -> None:
        formatted = self.mapper.to_database(point)
        assert self.mapper.map({"p": formatted}, "p") == point

    def test_srid_kept(self) -> None:
        assert self.mapper.to_database(Point(1, 2, 4326)) == "SRID=4326;POINT(1 2)"
        assert self.mapper.map({"p": "SRID=4326;POINT(1 2)"}, "p") == Point(1, 2, 4326)


class TestPostgisPointMapper:
    mapper = PostgisPointMapper()

    def test_map_hex_ewkb(self) -> None:
        row = {"geom": _ewkb(-73.98, 40.74, 4326)}
        assert self.mapper.map(row, "geom") == Point(-73.98, 40.74, 4326)

    def test_map_ewkt(self) -> None:
        assert self.mapper.map({"geom": "SRID=4326;POINT(1 2)"}, "geom") == Point(1, 2, 4326)

    def test_to_database_ewkt(self) -> None:
        assert self.mapper.to_database(Point(1, 2, 4326)) == "SRID=4326;POINT(1 2)"

    def test_format_parameter(self) -> None:
        assert self.mapper.format_parameter("geom") == "(:geom)::geometry"

    def test_round_trip_keeps_srid(self) -> None:
        point = Point(12.5, -7.125, 4326)
        assert self.mapper.map({"geom": self.mapper.to_database(point)}, "geom") == point

    def test_malformed(self) -> None:
        with pytest.raises(MalformedLiteralError):
            self.mapper.map({"geom": "NOT-A-POINT"}, "geom")
