"""Mapper protocol.

All row mappers implement this interface. Repositories hand a mapper to
the query-execution collaborator, which calls map_one / map_many on the
rows it fetched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, TypeVar

from row_orm.core.cursor import RowCursor

T = TypeVar("T")

Row = RowCursor | Mapping[str, Any]


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, row: Row) -> T:
        """Map a single row to a target object."""
        ...

    def map_many(self, rows: Iterable[Row]) -> list[T]:
        """Map multiple rows to a list of target objects."""
        ...
