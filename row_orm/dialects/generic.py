"""Generic dialect - the end of every dialect chain."""

from __future__ import annotations

import uuid
from typing import Any

from row_orm.dialects.base import ChainedDialect, is_enum_type
from row_orm.types.default import EnumStringMapper, JsonTypeMapper, UuidTypeMapper
from row_orm.types.protocol import TypeMapper


class GenericDialect(ChainedDialect):
    """Portable mappings: enums by name, UUIDs and JSON as text.

    Everything else falls through to the default mapper.
    """

    name = "generic"

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        if is_enum_type(python_type):
            return EnumStringMapper(python_type)
        if self.is_json_type(python_type):
            return JsonTypeMapper(python_type)
        if python_type is uuid.UUID:
            return UuidTypeMapper()
        return None
