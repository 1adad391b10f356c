"""Database dialect protocol.

Every dialect module MUST implement this protocol. Dialects are chained:
a dialect answers for the types it knows and delegates the rest to the
next dialect, ending at the generic dialect.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from row_orm.types.protocol import TypeMapper


@runtime_checkable
class Dialect(Protocol):
    """Type-mapping dialect protocol."""

    @property
    def name(self) -> str:
        """Dialect tag used as the registry qualifier (e.g. 'postgis')."""
        ...

    @property
    def supports_composite_types(self) -> bool:
        """False if register_composite_type always raises DialectError."""
        ...

    def mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        """Return a mapper for *python_type*, or None to use the default mapper."""
        ...

    def register_enum_type(self, enum_class: type[Enum], db_type_name: str | None = None) -> None:
        """Declare a native database enum type backing *enum_class*."""
        ...

    def register_json_type(self, json_class: type) -> None:
        """Declare *json_class* as stored in a JSON column."""
        ...

    def register_composite_type(self, composite_class: type, db_type_name: str) -> None:
        """Declare *composite_class* as a database composite (row) type."""
        ...
