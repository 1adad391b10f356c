"""Unit tests for boxed value classification and the default mapper."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import pytest

from row_orm.core.cursor import DictRowCursor
from row_orm.core.exceptions import ConversionError, UnsupportedTypeError
from row_orm.types.default import DEFAULT_MAPPER, DefaultTypeMapper
from row_orm.types.geometry import Point
from row_orm.types.values import (
    INT64_MAX,
    INT64_MIN,
    ValueKind,
    classify,
    narrow_decimal,
    normalize,
)


class TestClassify:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, ValueKind.NULL),
            (True, ValueKind.BOOLEAN),
            (7, ValueKind.INTEGER),
            (1.5, ValueKind.FLOAT),
            (Decimal("1.5"), ValueKind.DECIMAL),
            ("text", ValueKind.TEXT),
            (b"\x00", ValueKind.BLOB),
            (datetime.date(2024, 1, 1), ValueKind.TEMPORAL),
            (datetime.timedelta(seconds=5), ValueKind.TEMPORAL),
            (uuid.uuid4(), ValueKind.UUID),
            (Point(1, 2), ValueKind.GEOMETRY),
        ],
    )
    def test_known_shapes(self, value, kind: ValueKind) -> None:
        assert classify(value) is kind

    def test_unknown_shape(self) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            classify(object(), "payload")
        assert exc_info.value.value_type is object
        assert exc_info.value.column == "payload"


class TestNarrowDecimal:
    def test_whole_number_becomes_int(self) -> None:
        result = narrow_decimal(Decimal("100"))
        assert result == 100
        assert type(result) is int

    def test_fraction_unchanged(self) -> None:
        value = Decimal("100.50")
        result = narrow_decimal(value)
        assert result is value

    def test_positive_scale_whole_value_unchanged(self) -> None:
        assert isinstance(narrow_decimal(Decimal("100.00")), Decimal)

    def test_negative_scale_becomes_int(self) -> None:
        assert narrow_decimal(Decimal("1E+2")) == 100

    def test_int64_bounds_inclusive(self) -> None:
        assert narrow_decimal(Decimal(INT64_MAX)) == INT64_MAX
        assert narrow_decimal(Decimal(INT64_MIN)) == INT64_MIN

    def test_out_of_int64_range_unchanged(self) -> None:
        above = Decimal(INT64_MAX + 1)
        below = Decimal(INT64_MIN - 1)
        assert narrow_decimal(above) is above
        assert narrow_decimal(below) is below

    def test_non_finite_unchanged(self) -> None:
        assert narrow_decimal(Decimal("NaN")).is_nan()
        assert narrow_decimal(Decimal("Infinity")) == Decimal("Infinity")

    def test_normalize_passes_other_shapes(self) -> None:
        assert normalize(1.25) == 1.25
        assert normalize(True) is True


class TestDefaultTypeMapper:
    def test_maps_whole_decimal(self) -> None:
        assert DEFAULT_MAPPER.map({"amount": Decimal("100")}, "amount") == 100

    def test_keeps_fractional_decimal(self) -> None:
        assert DEFAULT_MAPPER.map({"amount": Decimal("100.50")}, "amount") == Decimal("100.50")

    def test_accepts_row_cursor(self) -> None:
        row = DictRowCursor({"n": Decimal("42")})
        assert DEFAULT_MAPPER.map(row, "n") == 42

    def test_null_is_none(self) -> None:
        assert DEFAULT_MAPPER.map({"amount": None}, "amount") is None

    def test_missing_column(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            DEFAULT_MAPPER.map({"other": 1}, "amount")
        assert exc_info.value.column == "amount"

    def test_unsupported_shape_names_column(self) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            DEFAULT_MAPPER.map({"payload": object()}, "payload")
        assert exc_info.value.column == "payload"

    def test_to_database_identity(self) -> None:
        value = Decimal("3.14")
        assert DEFAULT_MAPPER.to_database(value) is value
        assert DEFAULT_MAPPER.to_database(None) is None

    def test_to_database_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            DEFAULT_MAPPER.to_database(object())

    def test_format_parameter(self) -> None:
        assert DEFAULT_MAPPER.format_parameter("amount") == ":amount"

    def test_repr_names_target(self) -> None:
        assert repr(DefaultTypeMapper(int)) == "DefaultTypeMapper(int)"
