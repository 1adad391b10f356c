"""Relationship declaration DSL.

Provides a fluent builder for declaring relationships on an owner type:

    relations(User)
        .one_to_many("contacts", ContactInfo, foreign_key="user_id", repository=contacts)
        .many_to_one("group", foreign_key="group_id", repository=groups)
        .register(table)
"""

from __future__ import annotations

import typing
from typing import Any, NamedTuple

from row_orm.core.enums import RelationKind
from row_orm.core.exceptions import PlanCompilationError
from row_orm.core.introspect import collection_element_type, field_names, field_types
from row_orm.relations.metadata import RelationshipDescriptor, RelationshipTable


def relations(owner_type: type) -> RelationshipBuilder:
    """Entry point for the relationship DSL.

    Args:
        owner_type: The entity type that owns the relationship fields.

    Returns:
        A builder for chaining relationship declarations.
    """
    return RelationshipBuilder(owner_type)


class _Declaration(NamedTuple):
    kind: RelationKind
    field_name: str
    element_type: type | None
    foreign_key: str
    repository: Any
    references: str


class RelationshipBuilder:
    """Fluent builder for relationship declarations."""

    def __init__(self, owner_type: type) -> None:
        self._owner_type = owner_type
        self._declared: list[_Declaration] = []

    def one_to_many(
        self,
        field_name: str,
        element_type: type | None = None,
        *,
        foreign_key: str,
        repository: Any,
    ) -> RelationshipBuilder:
        """Declare a child collection loaded by foreign key.

        ``element_type`` defaults to X from the field's ``list[X]`` annotation.
        """
        self._declared.append(
            _Declaration(
                RelationKind.ONE_TO_MANY, field_name, element_type, foreign_key, repository, "id"
            )
        )
        return self

    def many_to_one(
        self,
        field_name: str,
        element_type: type | None = None,
        *,
        foreign_key: str,
        repository: Any,
        references: str = "id",
    ) -> RelationshipBuilder:
        """Declare a single related entity referenced by an owner field.

        ``foreign_key`` names the owner field holding the reference;
        ``references`` the field of the related entity it matches.
        ``element_type`` defaults to the field's ``X`` or ``X | None`` annotation.
        """
        self._declared.append(
            _Declaration(
                RelationKind.MANY_TO_ONE,
                field_name,
                element_type,
                foreign_key,
                repository,
                references,
            )
        )
        return self

    def build(self) -> tuple[RelationshipDescriptor, ...]:
        """Compile and validate the declarations into descriptors."""
        owner = self._owner_type
        owner_fields = field_types(owner)
        seen: set[str] = set()
        descriptors = []

        for declared in self._declared:
            field_name = declared.field_name
            where = f"{owner.__name__}.{field_name}"
            if field_name in seen:
                raise PlanCompilationError(f"Relationship {where} is declared twice")
            seen.add(field_name)

            if field_name not in owner_fields:
                raise PlanCompilationError(f"{owner.__name__} has no field '{field_name}'")

            if declared.kind is RelationKind.ONE_TO_MANY:
                annotated = collection_element_type(owner_fields[field_name])
            else:
                annotated = owner_fields[field_name]
                if typing.get_origin(annotated) is not None:
                    annotated = None
            element_type = _element_type(where, annotated, declared.element_type)

            if declared.kind is RelationKind.ONE_TO_MANY:
                if declared.foreign_key not in field_names(element_type):
                    raise PlanCompilationError(
                        f"{element_type.__name__} has no foreign key field "
                        f"'{declared.foreign_key}' for {where}"
                    )
            else:
                if declared.foreign_key not in owner_fields:
                    raise PlanCompilationError(
                        f"{owner.__name__} has no foreign key field "
                        f"'{declared.foreign_key}' for {where}"
                    )
                if declared.references not in field_names(element_type):
                    raise PlanCompilationError(
                        f"{element_type.__name__} has no field '{declared.references}' "
                        f"referenced by {where}"
                    )

            _check_repository(where, declared.repository, element_type)

            descriptors.append(
                RelationshipDescriptor(
                    field_name=field_name,
                    foreign_key=declared.foreign_key,
                    repository=declared.repository,
                    element_type=element_type,
                    kind=declared.kind,
                    references=declared.references,
                )
            )

        return tuple(descriptors)

    def register(self, table: RelationshipTable) -> tuple[RelationshipDescriptor, ...]:
        """Build and register every declaration on *table*."""
        descriptors = self.build()
        for descriptor in descriptors:
            table.register(self._owner_type, descriptor)
        return descriptors


def _element_type(where: str, annotated: Any, explicit: type | None) -> type:
    if explicit is None:
        if not isinstance(annotated, type):
            raise PlanCompilationError(f"Cannot infer element type of {where}; pass it explicitly")
        return annotated
    if isinstance(annotated, type) and annotated is not explicit:
        raise PlanCompilationError(
            f"{where} holds {annotated.__name__}, not {explicit.__name__}"
        )
    return explicit


def _check_repository(where: str, repository: Any, element_type: type) -> None:
    if not callable(getattr(repository, "find_by_foreign_key", None)):
        raise PlanCompilationError(
            f"Repository for {where} does not implement find_by_foreign_key"
        )
    repo_type = getattr(repository, "entity_type", None)
    if repo_type is not None and repo_type is not element_type:
        raise PlanCompilationError(
            f"Repository for {where} serves {repo_type.__name__}, "
            f"expected {element_type.__name__}"
        )
