"""Row cursor contract.

A row cursor exposes one positioned result row by column name. The
query-execution layer owns real cursors; this module only adapts what it
hands over (DB-API cursors, dict rows, sqlite3.Row, psycopg dict_row).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RowCursor(Protocol):
    """Positioned-row value access by column name."""

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names of the current row, in result order."""
        ...

    def has(self, column: str) -> bool:
        """True if the row carries the column."""
        ...

    def get(self, column: str) -> Any:
        """Boxed value of the column. Raises KeyError for unknown columns."""
        ...

    def is_null(self, column: str) -> bool:
        """True if the column holds SQL NULL."""
        ...


class DictRowCursor:
    """RowCursor over a single row held as a mapping."""

    __slots__ = ("_row",)

    def __init__(self, row: Mapping[str, Any]) -> None:
        self._row = dict(row)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._row)

    def has(self, column: str) -> bool:
        return column in self._row

    def get(self, column: str) -> Any:
        return self._row[column]

    def is_null(self, column: str) -> bool:
        return self._row[column] is None

    def as_dict(self) -> dict[str, Any]:
        return dict(self._row)

    def __iter__(self) -> Iterator[str]:
        return iter(self._row)

    def __repr__(self) -> str:
        return f"DictRowCursor({self._row!r})"


def as_row_cursor(row: RowCursor | Mapping[str, Any]) -> RowCursor:
    """Adapt a mapping (or mapping-like row such as sqlite3.Row) to a RowCursor."""
    if isinstance(row, RowCursor):
        return row
    if isinstance(row, Mapping):
        return DictRowCursor(row)
    if hasattr(row, "keys"):
        # sqlite3.Row is not a Mapping but supports keys() and item access
        return DictRowCursor({key: row[key] for key in row.keys()})  # type: ignore[attr-defined,index]
    raise TypeError(f"Cannot use {type(row).__name__} as a row cursor")


def rows_from_cursor(cursor: Any) -> list[DictRowCursor]:
    """Drain a DB-API cursor into row cursors.

    Handles both tuple-like rows and dict-like rows from different drivers.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    first_row = rows[0]
    if isinstance(first_row, Mapping):
        return [DictRowCursor(row) for row in rows]
    if hasattr(first_row, "keys"):
        return [DictRowCursor({key: row[key] for key in row.keys()}) for row in rows]

    return [DictRowCursor(dict(zip(columns, row, strict=True))) for row in rows]
