"""PostGIS dialect - PostgreSQL plus geometry points."""

from __future__ import annotations

from typing import Any

from row_orm.dialects.base import ChainedDialect
from row_orm.dialects.postgresql import PostgresDialect
from row_orm.dialects.protocol import Dialect
from row_orm.dialects.spatial import PostgisPointMapper
from row_orm.types.geometry import Point
from row_orm.types.protocol import TypeMapper


class PostgisDialect(ChainedDialect):
    """Handles Point; delegates everything else to the PostgreSQL dialect."""

    name = "postgis"

    def __init__(self, next_dialect: Dialect | None = None) -> None:
        super().__init__(next_dialect if next_dialect is not None else PostgresDialect())

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        if python_type is Point:
            return PostgisPointMapper()
        return None
