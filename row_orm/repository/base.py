"""Repository base classes.

Thin wrappers over an engine-like collaborator and a row mapper. The
collaborator owns SQL, connections and cursors; it resolves named
queries ("<namespace>.<query>") and hands fetched rows to the mapper:

    engine.fetch_all(query_name, params, mapper=mapper) -> list[T]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from row_orm.core.introspect import snake_case
from row_orm.mapping.model import ModelMapper
from row_orm.mapping.protocol import Mapper

T = TypeVar("T")


class _RepositoryBase(Generic[T]):
    entity_type: type[T] | None = None
    namespace: str | None = None

    def __init__(
        self,
        engine: Any,
        mapper: Mapper[T] | None = None,
        entity_type: type[T] | None = None,
        namespace: str | None = None,
    ) -> None:
        self.engine = engine
        if entity_type is not None:
            self.entity_type = entity_type
        if namespace is not None:
            self.namespace = namespace
        elif self.namespace is None:
            if self.entity_type is None:
                raise ValueError(f"{type(self).__name__} needs a namespace or an entity_type")
            self.namespace = snake_case(self.entity_type.__name__)

        if mapper is not None:
            self.mapper: Mapper[T] | None = mapper
        elif self.entity_type is not None:
            self.mapper = ModelMapper(self.entity_type)
        else:
            self.mapper = None

    def query_name(self, field_name: str) -> str:
        """Registered query name for a lookup by *field_name*."""
        return f"{self.namespace}.find_by_{field_name}"


class Repository(_RepositoryBase[T]):
    """Base repository class for DDD-oriented usage.

    Subclasses define concrete data access methods that delegate to
    the engine. ``find_by_foreign_key`` is provided for relationship
    resolution.
    """

    def find_by_foreign_key(self, field_name: str, value: Any) -> Sequence[T]:
        result = self.engine.fetch_all(
            self.query_name(field_name), {field_name: value}, mapper=self.mapper
        )
        return list(result or ())


class AsyncRepository(_RepositoryBase[T]):
    """Async variant of Repository."""

    async def find_by_foreign_key(self, field_name: str, value: Any) -> Sequence[T]:
        result = await self.engine.fetch_all(
            self.query_name(field_name), {field_name: value}, mapper=self.mapper
        )
        return list(result or ())
