"""Relationship resolver.

Populates relationship fields declared in a RelationshipTable by asking
the referenced repository for related entities:

    one-to-many   children whose foreign key equals the owner's id -> list
    many-to-one   the entity whose referenced field equals the owner's
                  foreign key value -> entity or None

Resolving distinct (entity, field) pairs shares no state, so batches fan
out over a thread pool (or asyncio.gather) without locks.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Any

from row_orm.core.entity import Entity
from row_orm.core.exceptions import RelationshipResolutionError
from row_orm.relations.metadata import RelationshipDescriptor, RelationshipTable
from row_orm.repository.protocol import BatchForeignKeyRepository

if TYPE_CHECKING:
    from row_orm.core.config import MappingConfig

logger = logging.getLogger(__name__)


class _ResolverBase:
    def __init__(self, table: RelationshipTable) -> None:
        self._table = table

    @property
    def table(self) -> RelationshipTable:
        return self._table

    def _descriptor(self, entity: Any, field_name: str) -> RelationshipDescriptor:
        return self._table.descriptor(type(entity), field_name)

    def _selected(
        self, entity: Any, fields: Sequence[str] | None
    ) -> tuple[RelationshipDescriptor, ...]:
        if fields is None:
            return self._table.descriptors_for(type(entity))
        return tuple(self._descriptor(entity, name) for name in fields)

    @staticmethod
    def _lookup_value(entity: Any, descriptor: RelationshipDescriptor) -> Any:
        """Owner's id (one-to-many) or foreign key value (many-to-one)."""
        if not descriptor.is_collection:
            try:
                return getattr(entity, descriptor.foreign_key)
            except AttributeError as e:
                raise RelationshipResolutionError(
                    type(entity),
                    descriptor.field_name,
                    f"entity has no foreign key field '{descriptor.foreign_key}'",
                ) from e
        if not isinstance(entity, Entity):
            raise RelationshipResolutionError(
                type(entity), descriptor.field_name, "entity does not implement get_id()/set_id()"
            )
        return entity.get_id()

    @staticmethod
    def _log_fetch(entity: Any, descriptor: RelationshipDescriptor, value: Any) -> None:
        logger.debug(
            "Fetching %s.%s for %s.%s (value=%r)",
            descriptor.element_type.__name__,
            descriptor.lookup_field,
            type(entity).__name__,
            descriptor.field_name,
            value,
        )

    @staticmethod
    def _fetch_failed(
        entity: Any, descriptor: RelationshipDescriptor, error: Exception
    ) -> RelationshipResolutionError:
        logger.warning(
            "Failed to resolve %s.%s: %s",
            type(entity).__name__,
            descriptor.field_name,
            error,
        )
        return RelationshipResolutionError(type(entity), descriptor.field_name, str(error))

    @staticmethod
    def _assign(entity: Any, descriptor: RelationshipDescriptor, found: Sequence[Any]) -> Any:
        """Set the field from the fetched entities; returns the assigned value."""
        if descriptor.is_collection:
            value: Any = list(found)
        elif len(found) > 1:
            raise RelationshipResolutionError(
                type(entity),
                descriptor.field_name,
                f"expected at most one {descriptor.element_type.__name__}, got {len(found)}",
            )
        else:
            value = found[0] if found else None
        try:
            setattr(entity, descriptor.field_name, value)
        except (AttributeError, TypeError, ValueError) as e:
            raise RelationshipResolutionError(
                type(entity), descriptor.field_name, f"cannot assign field: {e}"
            ) from e
        return value


class RelationshipResolver(_ResolverBase):
    """Resolves relationship fields through synchronous repositories.

    Args:
        table: Relationship metadata.
        max_workers: Thread pool size for resolve_many.
    """

    def __init__(self, table: RelationshipTable, max_workers: int = 4) -> None:
        super().__init__(table)
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max_workers = max_workers

    @classmethod
    def from_config(cls, table: RelationshipTable, config: MappingConfig) -> RelationshipResolver:
        return cls(table, max_workers=config.resolver_workers)

    def resolve(self, entity: Any, field_name: str) -> Any:
        """Fetch and assign one relationship field; returns the assigned value."""
        return self._resolve(entity, self._descriptor(entity, field_name))

    def resolve_all(self, entity: Any, fields: Sequence[str] | None = None) -> dict[str, Any]:
        """Resolve every (or the named) relationship of *entity*, in declaration order."""
        return {
            descriptor.field_name: self._resolve(entity, descriptor)
            for descriptor in self._selected(entity, fields)
        }

    def resolve_many(self, entities: Iterable[Any], fields: Sequence[str] | None = None) -> None:
        """Resolve relationships of many entities concurrently.

        One task runs per (entity, field) pair. All tasks finish before the
        first failure (in submission order) is raised.
        """
        tasks = [
            (entity, descriptor)
            for entity in entities
            for descriptor in self._selected(entity, fields)
        ]
        if not tasks:
            return

        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(tasks)),
            thread_name_prefix="row-orm-resolver",
        ) as pool:
            futures = [pool.submit(self._resolve, entity, descriptor) for entity, descriptor in tasks]
            wait(futures)

        for future in futures:
            error = future.exception()
            if error is not None:
                raise error

    def resolve_batch(self, entities: Iterable[Any], field_name: str) -> None:
        """Resolve one field for many entities with a single lookup when possible.

        Uses ``find_all_by_foreign_key_in`` when the repository provides it;
        otherwise resolves each entity in turn.
        """
        entities = list(entities)
        if not entities:
            return

        descriptors = {self._descriptor(entity, field_name) for entity in entities}
        descriptor = self._descriptor(entities[0], field_name)
        repository = descriptor.repository
        if len(descriptors) > 1 or not isinstance(repository, BatchForeignKeyRepository):
            for entity in entities:
                self._resolve(entity, self._descriptor(entity, field_name))
            return

        keys = [self._lookup_value(entity, descriptor) for entity in entities]
        distinct_keys = list(dict.fromkeys(key for key in keys if key is not None))
        found: list[Any] = []
        if distinct_keys:
            logger.debug(
                "Batch fetching %s.%s for %d keys",
                descriptor.element_type.__name__,
                descriptor.lookup_field,
                len(distinct_keys),
            )
            try:
                found = list(
                    repository.find_all_by_foreign_key_in(descriptor.lookup_field, distinct_keys)
                    or ()
                )
            except Exception as e:
                raise self._fetch_failed(entities[0], descriptor, e) from e

        grouped: dict[Any, list[Any]] = {}
        for related in found:
            try:
                key = getattr(related, descriptor.lookup_field)
            except AttributeError as e:
                raise RelationshipResolutionError(
                    type(entities[0]),
                    field_name,
                    f"related entity has no field '{descriptor.lookup_field}'",
                ) from e
            grouped.setdefault(key, []).append(related)

        for entity, key in zip(entities, keys, strict=True):
            self._assign(entity, descriptor, grouped.get(key, []) if key is not None else [])

    def _resolve(self, entity: Any, descriptor: RelationshipDescriptor) -> Any:
        value = self._lookup_value(entity, descriptor)
        if value is None:
            return self._assign(entity, descriptor, [])

        self._log_fetch(entity, descriptor, value)
        try:
            result = descriptor.repository.find_by_foreign_key(descriptor.lookup_field, value)
        except Exception as e:
            raise self._fetch_failed(entity, descriptor, e) from e
        return self._assign(entity, descriptor, list(result or ()))


class AsyncRelationshipResolver(_ResolverBase):
    """Async variant of RelationshipResolver.

    Repositories may implement ``find_by_foreign_key`` as a coroutine
    function or a plain function.
    """

    async def resolve(self, entity: Any, field_name: str) -> Any:
        return await self._resolve(entity, self._descriptor(entity, field_name))

    async def resolve_all(
        self, entity: Any, fields: Sequence[str] | None = None
    ) -> dict[str, Any]:
        resolved = {}
        for descriptor in self._selected(entity, fields):
            resolved[descriptor.field_name] = await self._resolve(entity, descriptor)
        return resolved

    async def resolve_many(
        self, entities: Iterable[Any], fields: Sequence[str] | None = None
    ) -> None:
        """Resolve relationships of many entities concurrently with asyncio.gather."""
        pairs = [
            (entity, descriptor)
            for entity in entities
            for descriptor in self._selected(entity, fields)
        ]
        results = await asyncio.gather(
            *(self._resolve(entity, descriptor) for entity, descriptor in pairs),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def _resolve(self, entity: Any, descriptor: RelationshipDescriptor) -> Any:
        value = self._lookup_value(entity, descriptor)
        if value is None:
            return self._assign(entity, descriptor, [])

        self._log_fetch(entity, descriptor, value)
        try:
            result = descriptor.repository.find_by_foreign_key(descriptor.lookup_field, value)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise self._fetch_failed(entity, descriptor, e) from e
        return self._assign(entity, descriptor, list(result or ()))
