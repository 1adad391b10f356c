"""Entity identity contract."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

ID = TypeVar("ID")


@runtime_checkable
class Entity(Protocol[ID]):
    """Any mapped record with a gettable/settable identifier."""

    def get_id(self) -> ID | None: ...

    def set_id(self, value: ID | None) -> None: ...


class EntityMixin:
    """Implements the Entity contract over an ``id`` attribute.

    Works with dataclasses, Pydantic models and plain classes alike, as
    long as they declare ``id``.
    """

    def get_id(self) -> Any:
        return getattr(self, "id", None)

    def set_id(self, value: Any) -> None:
        self.id = value
