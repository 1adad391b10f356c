"""Row-to-model mapper and model-to-parameter binder.

Supports dataclasses, Pydantic models, and plain classes. Each field is
converted by the TypeMapper the registry resolves for its declared type
and the active dialect. Relationship fields are left to the relationship
resolver, except many-to-one fields whose related entity was joined into
the row as ``<field>.<column>`` columns (``g.name AS "group.name"``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ValidationError

from row_orm.core.cursor import RowCursor, as_row_cursor
from row_orm.core.exceptions import ColumnMismatchError, MappingError
from row_orm.core.introspect import field_types, is_pydantic_model, required_field_names
from row_orm.core.params import normalize_params
from row_orm.types.protocol import TypeMapper, with_column
from row_orm.types.registry import TypeMapperRegistry

if TYPE_CHECKING:
    from row_orm.core.config import MappingConfig
    from row_orm.relations.metadata import RelationshipTable
    from row_orm.relations.resolver import RelationshipResolver

T = TypeVar("T")


class _FieldPlan(Generic[T]):
    """Field names and types of a target class, minus relationship fields."""

    def __init__(
        self,
        target_class: type[T],
        registry: TypeMapperRegistry | None,
        dialect: str | None,
        relations: RelationshipTable | None,
    ) -> None:
        self._target_class = target_class
        self._registry = registry if registry is not None else TypeMapperRegistry()
        self._dialect = dialect
        self._relationship_fields = set(relations.field_names(target_class)) if relations else set()
        self._field_types = {
            name: annotation
            for name, annotation in field_types(target_class).items()
            if name not in self._relationship_fields
        }

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._field_types)

    def mapper_for(self, field_name: str) -> TypeMapper[Any]:
        return self._registry.resolver_for(self._field_types[field_name], self._dialect)


class ModelMapper(_FieldPlan[T]):
    """Row-to-model mapper.

    Construction order:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass / plain class -> target_class(**values)

    Args:
        target_class: The class to construct from row data.
        registry: Type mapper registry. Defaults to a generic-dialect registry.
        dialect: Dialect used for mapper lookup. Defaults to the registry's.
        aliases: Optional column-name to field-name mapping.
        strict: Require a column for every field, even those with defaults.
        relations: Relationship table; its fields on target_class are not read
            as columns. Many-to-one fields are built from joined columns.
        resolver: When given, relationships are resolved right after mapping,
            skipping fields already built from joined columns.
    """

    def __init__(
        self,
        target_class: type[T],
        registry: TypeMapperRegistry | None = None,
        dialect: str | None = None,
        aliases: dict[str, str] | None = None,
        strict: bool = False,
        relations: RelationshipTable | None = None,
        resolver: RelationshipResolver | None = None,
    ) -> None:
        if relations is None and resolver is not None:
            relations = resolver.table
        super().__init__(target_class, registry, dialect, relations)
        self._strict = strict
        self._resolver = resolver
        self._relations = relations
        self._joins = {
            d.field_name: d
            for d in (relations.descriptors_for(target_class) if relations else ())
            if not d.is_collection
        }
        self._join_mappers: dict[str, ModelMapper[Any]] = {}
        self._is_pydantic = is_pydantic_model(target_class)
        self._required = required_field_names(target_class) - self._relationship_fields
        field_to_column = {field: column for column, field in (aliases or {}).items()}
        self._columns = {name: field_to_column.get(name, name) for name in self._field_types}

    @classmethod
    def from_config(
        cls,
        target_class: type[T],
        config: MappingConfig,
        registry: TypeMapperRegistry | None = None,
        **kwargs: Any,
    ) -> ModelMapper[T]:
        """Build a mapper honoring the config's aliases, strictness and dialect."""
        return cls(
            target_class,
            registry=registry if registry is not None else TypeMapperRegistry.from_config(config),
            dialect=config.dialect,
            aliases=config.aliases,
            strict=config.strict,
            **kwargs,
        )

    def map_one(self, row: RowCursor | Mapping[str, Any]) -> T:
        """Map a single row to a target_class instance."""
        cursor = as_row_cursor(row)
        entity = self._build(cursor)
        if self._resolver is not None:
            self._resolver.resolve_all(entity, self._fields_to_resolve(self._resolver, cursor))
        return entity

    def map_many(self, rows: Iterable[RowCursor | Mapping[str, Any]]) -> list[T]:
        """Map all rows; relationships (if any) are resolved as one batch.

        Rows are expected to come from one result set, so the joined
        columns of the first row stand for all of them.
        """
        cursors = [as_row_cursor(row) for row in rows]
        entities = [self._build(cursor) for cursor in cursors]
        if self._resolver is not None and entities:
            fields = self._fields_to_resolve(self._resolver, cursors[0])
            self._resolver.resolve_many(entities, fields)
        return entities

    def _joined_fields(self, cursor: RowCursor) -> set[str]:
        prefixes = {column.partition(".")[0] for column in cursor.columns if "." in column}
        return prefixes & self._joins.keys()

    def _fields_to_resolve(
        self, resolver: RelationshipResolver, cursor: RowCursor
    ) -> tuple[str, ...] | None:
        """Relationship fields not already filled from joined columns."""
        joined = self._joined_fields(cursor)
        if not joined:
            return None
        return tuple(
            name for name in resolver.table.field_names(self._target_class) if name not in joined
        )

    def _join_mapper(self, field_name: str) -> ModelMapper[Any]:
        mapper = self._join_mappers.get(field_name)
        if mapper is None:
            mapper = ModelMapper(
                self._joins[field_name].element_type,
                registry=self._registry,
                dialect=self._dialect,
                relations=self._relations,
            )
            self._join_mappers[field_name] = mapper
        return mapper

    def _map_joined(self, cursor: RowCursor, field_name: str) -> Any:
        """Build the related entity from ``<field>.<column>`` columns."""
        prefix = f"{field_name}."
        nested = {
            column[len(prefix):]: cursor.get(column)
            for column in cursor.columns
            if column.startswith(prefix)
        }
        # a LEFT JOIN without a match yields only NULLs
        if all(value is None for value in nested.values()):
            return None
        return self._join_mapper(field_name).map_one(nested)

    def _build(self, row: RowCursor | Mapping[str, Any]) -> T:
        cursor = as_row_cursor(row)
        values: dict[str, Any] = {}
        for name in self._joined_fields(cursor):
            values[name] = self._map_joined(cursor, name)
        missing = []
        for name, column in self._columns.items():
            if not cursor.has(column):
                if self._strict or name in self._required:
                    missing.append(name)
                continue
            values[name] = self.mapper_for(name).map(cursor, column)

        if missing:
            raise ColumnMismatchError(self._target_class.__name__, missing)

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(values)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e

        try:
            return self._target_class(**values)
        except TypeError as e:
            raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e


@dataclass(frozen=True)
class BoundParameters:
    """Values to bind and the placeholder expression for each field."""

    values: dict[str, Any]
    placeholders: dict[str, str]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.values)


class ParameterBinder(_FieldPlan[T]):
    """Converts entity fields into statement parameters.

    Args:
        target_class: The entity class whose fields are bound.
        registry: Type mapper registry. Defaults to a generic-dialect registry.
        dialect: Dialect used for mapper lookup. Defaults to the registry's.
        paramstyle: Driver paramstyle for placeholders ('named', 'pyformat',
            'format' or 'qmark').
        relations: Relationship table; its fields on target_class are skipped.
    """

    def __init__(
        self,
        target_class: type[T],
        registry: TypeMapperRegistry | None = None,
        dialect: str | None = None,
        paramstyle: str = "named",
        relations: RelationshipTable | None = None,
    ) -> None:
        super().__init__(target_class, registry, dialect, relations)
        normalize_params("", paramstyle)
        self._paramstyle = paramstyle

    def bind(self, entity: T, fields: Sequence[str] | None = None) -> BoundParameters:
        """Convert *fields* (default: every mapped field) of *entity*."""
        names = self.field_names if fields is None else tuple(fields)
        unknown = [name for name in names if name not in self._field_types]
        if unknown:
            raise ColumnMismatchError(self._target_class.__name__, unknown)

        values: dict[str, Any] = {}
        placeholders: dict[str, str] = {}
        for name in names:
            mapper = self.mapper_for(name)
            try:
                values[name] = mapper.to_database(getattr(entity, name))
            except MappingError as e:
                wrapped = with_column(e, name)
                if wrapped is e:
                    raise
                raise wrapped from e
            placeholders[name] = normalize_params(mapper.format_parameter(name), self._paramstyle)
        return BoundParameters(values=values, placeholders=placeholders)
