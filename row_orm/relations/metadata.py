"""Relationship metadata.

Relationships are declared once at startup (see ``relations.builder``)
and stored in a RelationshipTable keyed by owner type. Descriptors are
frozen; the table swaps in a new dict under a lock on every
registration so readers never see a partial update.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from row_orm.core.enums import RelationKind
from row_orm.core.exceptions import RegistryError, RelationshipResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RelationshipDescriptor:
    """Relationship from an owner field to the repository of another entity.

    One-to-many: the field holds a list of children whose ``foreign_key``
    equals the owner's id.
    Many-to-one: the field holds a single entity whose ``references`` field
    equals the owner's ``foreign_key`` value.

    Attributes:
        field_name: Field on the owner entity.
        foreign_key: Child field (one-to-many) or owner field (many-to-one).
        repository: Repository capability used for the lookup.
        element_type: Type of the related entity.
        kind: Cardinality of the relationship.
        references: Field of the related entity matched by a many-to-one
            foreign key.
    """

    field_name: str
    foreign_key: str
    repository: Any
    element_type: type
    kind: RelationKind = RelationKind.ONE_TO_MANY
    references: str = "id"

    @property
    def is_collection(self) -> bool:
        return self.kind is RelationKind.ONE_TO_MANY

    @property
    def lookup_field(self) -> str:
        """Field of the related entity that the repository is queried by."""
        return self.foreign_key if self.is_collection else self.references


class RelationshipTable:
    """Owner type -> relationship descriptors, in declaration order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[type, tuple[RelationshipDescriptor, ...]] = {}
        self._frozen = False

    def register(self, owner_type: type, descriptor: RelationshipDescriptor) -> None:
        """Add *descriptor* to *owner_type*.

        Raises:
            RegistryError: If the table is frozen or the field is already declared.
        """
        with self._lock:
            if self._frozen:
                raise RegistryError("Relationship table is frozen")
            current = self._entries.get(owner_type, ())
            if any(d.field_name == descriptor.field_name for d in current):
                raise RegistryError(
                    f"Relationship {owner_type.__name__}.{descriptor.field_name} "
                    f"is already registered"
                )
            self._entries = {**self._entries, owner_type: (*current, descriptor)}
        logger.debug(
            "Registered %s relationship %s.%s -> %s.%s",
            descriptor.kind.value,
            owner_type.__name__,
            descriptor.field_name,
            descriptor.element_type.__name__,
            descriptor.lookup_field,
        )

    def descriptors_for(self, entity_type: type) -> tuple[RelationshipDescriptor, ...]:
        """Descriptors declared for *entity_type* (or its nearest registered base)."""
        entries = self._entries
        for cls in entity_type.__mro__:
            if cls in entries:
                return entries[cls]
        return ()

    def descriptor(self, entity_type: type, field_name: str) -> RelationshipDescriptor:
        for descriptor in self.descriptors_for(entity_type):
            if descriptor.field_name == field_name:
                return descriptor
        raise RelationshipResolutionError(entity_type, field_name, "no relationship declared")

    def field_names(self, entity_type: type) -> tuple[str, ...]:
        return tuple(d.field_name for d in self.descriptors_for(entity_type))

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, entity_type: object) -> bool:
        return isinstance(entity_type, type) and bool(self.descriptors_for(entity_type))

    def __len__(self) -> int:
        return sum(len(descriptors) for descriptors in self._entries.values())
