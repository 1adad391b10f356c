"""RowORM - declarative row-to-entity mapping and relationship resolution."""

from __future__ import annotations

from row_orm.core.config import MappingConfig
from row_orm.core.cursor import DictRowCursor, RowCursor, as_row_cursor, rows_from_cursor
from row_orm.core.entity import Entity, EntityMixin
from row_orm.core.enums import DialectName, RelationKind
from row_orm.core.exceptions import (
    ColumnMismatchError,
    ConversionError,
    DialectError,
    MalformedLiteralError,
    MappingError,
    PlanCompilationError,
    RegistryError,
    RelationshipResolutionError,
    RowOrmError,
    UnsupportedTypeError,
)
from row_orm.dialects import load_dialect
from row_orm.mapping.model import BoundParameters, ModelMapper, ParameterBinder
from row_orm.relations.builder import relations
from row_orm.relations.metadata import RelationshipDescriptor, RelationshipTable
from row_orm.relations.resolver import AsyncRelationshipResolver, RelationshipResolver
from row_orm.repository.base import AsyncRepository, Repository
from row_orm.types.default import DEFAULT_MAPPER, DefaultTypeMapper
from row_orm.types.geometry import Point
from row_orm.types.protocol import BaseTypeMapper, TypeMapper
from row_orm.types.registry import TypeMapperRegistry

__all__ = [
    # Configuration
    "MappingConfig",
    "DialectName",
    "load_dialect",
    # Rows
    "RowCursor",
    "DictRowCursor",
    "as_row_cursor",
    "rows_from_cursor",
    # Entities
    "Entity",
    "EntityMixin",
    # Type mapping
    "TypeMapper",
    "BaseTypeMapper",
    "DefaultTypeMapper",
    "DEFAULT_MAPPER",
    "TypeMapperRegistry",
    "Point",
    # Model mapping
    "ModelMapper",
    "ParameterBinder",
    "BoundParameters",
    # Relationships
    "relations",
    "RelationKind",
    "RelationshipDescriptor",
    "RelationshipTable",
    "RelationshipResolver",
    "AsyncRelationshipResolver",
    # Repository
    "Repository",
    "AsyncRepository",
    # Exceptions
    "RowOrmError",
    "RegistryError",
    "DialectError",
    "MappingError",
    "ConversionError",
    "UnsupportedTypeError",
    "MalformedLiteralError",
    "RelationshipResolutionError",
    "ColumnMismatchError",
    "PlanCompilationError",
]
