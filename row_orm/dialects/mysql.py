"""MySQL dialect - JSON columns as text, optional spatial points."""

from __future__ import annotations

from typing import Any

from row_orm.core.exceptions import DialectError
from row_orm.dialects.base import ChainedDialect
from row_orm.dialects.generic import GenericDialect
from row_orm.dialects.protocol import Dialect
from row_orm.dialects.spatial import WktPointMapper
from row_orm.types.default import JsonTypeMapper
from row_orm.types.geometry import Point
from row_orm.types.protocol import TypeMapper


class MySQLDialect(ChainedDialect):
    """MySQL dialect; delegates to the generic dialect.

    MySQL has no native composite types, so registering one is rejected.
    """

    name = "mysql"
    supports_composite_types = False

    def __init__(self, next_dialect: Dialect | None = None) -> None:
        super().__init__(next_dialect if next_dialect is not None else GenericDialect())

    def register_composite_type(self, composite_class: type, db_type_name: str) -> None:
        raise DialectError(
            f"{self.name} does not support native composite types; "
            f"use a JSON column for {composite_class.__name__}"
        )

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        if self.is_json_type(python_type):
            return JsonTypeMapper(python_type)
        return None


class MySQLSpatialDialect(MySQLDialect):
    """MySQL with spatial Point columns."""

    name = "mysql_spatial"

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        if python_type is Point:
            return WktPointMapper()
        return super().own_mapper_for(python_type)
