"""TypeMapper protocol.

A TypeMapper converts between the database representation of one column
and one Python type. ModelMapper calls ``map`` per column when building
entities; ParameterBinder calls ``to_database`` and ``format_parameter``
when binding entity fields to a statement.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from row_orm.core.cursor import RowCursor, as_row_cursor
from row_orm.core.exceptions import (
    ConversionError,
    MalformedLiteralError,
    MappingError,
    UnsupportedTypeError,
)
from row_orm.core.params import named_placeholder

T = TypeVar("T")


@runtime_checkable
class TypeMapper(Protocol[T]):
    """Conversion strategy between a column value and a Python value."""

    def map(self, row: RowCursor | Mapping[str, Any], column_name: str) -> T | None:
        """Read the named column from the row and return the Python value."""
        ...

    def to_database(self, value: T | None) -> Any:
        """Convert a Python value to what the statement layer should bind."""
        ...

    def format_parameter(self, param_name: str) -> str:
        """Placeholder expression for a named parameter."""
        ...


def with_column(error: MappingError, column: str) -> MappingError:
    """Return *error* carrying *column*, rebuilding it if it has none."""
    if isinstance(error, MalformedLiteralError):
        if error.column is None:
            return MalformedLiteralError(error.literal, error.grammar, column)
    elif isinstance(error, ConversionError):
        if error.column is None:
            return ConversionError(column, error.target_type, error.detail)
    elif isinstance(error, UnsupportedTypeError):
        if error.column is None:
            return UnsupportedTypeError(error.value_type, column)
    return error


class BaseTypeMapper(Generic[T]):
    """Shared read/convert/wrap logic for TypeMapper implementations.

    Subclasses implement ``load`` (non-null database value -> Python) and
    ``dump`` (non-null Python value -> bindable value), and may override
    ``format_parameter``. Every failure surfaces as a MappingError that
    names the column.
    """

    target_type: Any = object

    def map(self, row: RowCursor | Mapping[str, Any], column_name: str) -> T | None:
        cursor = as_row_cursor(row)
        if not cursor.has(column_name):
            raise ConversionError(column_name, self.target_type, "column not present in row")
        try:
            if cursor.is_null(column_name):
                return None
            raw = cursor.get(column_name)
        except Exception as e:
            raise ConversionError(
                column_name, self.target_type, f"failed to read value: {e}"
            ) from e

        try:
            return self.load(raw)
        except MappingError as e:
            wrapped = with_column(e, column_name)
            if wrapped is e:
                raise
            raise wrapped from e
        except Exception as e:
            raise ConversionError(column_name, self.target_type, str(e)) from e

    def to_database(self, value: T | None) -> Any:
        if value is None:
            return None
        try:
            return self.dump(value)
        except MappingError:
            raise
        except Exception as e:
            raise ConversionError(None, self.target_type, str(e)) from e

    def format_parameter(self, param_name: str) -> str:
        return named_placeholder(param_name)

    def load(self, value: Any) -> T:
        raise NotImplementedError

    def dump(self, value: T) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self.target_type, '__name__', self.target_type)})"
