"""Relations - relationship metadata, declaration DSL and resolvers."""

from __future__ import annotations

from row_orm.relations.builder import RelationshipBuilder, relations
from row_orm.relations.metadata import RelationshipDescriptor, RelationshipTable
from row_orm.relations.resolver import AsyncRelationshipResolver, RelationshipResolver

__all__ = [
    "relations",
    "RelationshipBuilder",
    "RelationshipDescriptor",
    "RelationshipTable",
    "RelationshipResolver",
    "AsyncRelationshipResolver",
]
