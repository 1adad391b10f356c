"""Repository capability protocols.

The relationship resolver only needs a foreign-key lookup from the
referenced repository. Full CRUD orchestration lives elsewhere.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ForeignKeyRepository(Protocol[T]):
    """Fetches child entities by a foreign-key field value."""

    def find_by_foreign_key(self, field_name: str, value: Any) -> Sequence[T]:
        """Return all entities whose *field_name* equals *value*, in order."""
        ...


@runtime_checkable
class BatchForeignKeyRepository(ForeignKeyRepository[T], Protocol[T]):
    """Foreign-key lookup that can also fetch children for many parents at once."""

    def find_all_by_foreign_key_in(self, field_name: str, values: Sequence[Any]) -> Sequence[T]:
        """Return all entities whose *field_name* is one of *values*."""
        ...


@runtime_checkable
class AsyncForeignKeyRepository(Protocol[T]):
    """Async variant of ForeignKeyRepository."""

    async def find_by_foreign_key(self, field_name: str, value: Any) -> Sequence[T]: ...
