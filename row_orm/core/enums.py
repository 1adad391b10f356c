"""Dialect and relationship enumerations."""

from __future__ import annotations

from enum import Enum


class DialectName(Enum):
    """Supported database dialects and extensions."""

    GENERIC = "generic"
    POSTGRESQL = "postgresql"
    POSTGIS = "postgis"
    MYSQL = "mysql"
    MYSQL_SPATIAL = "mysql_spatial"
    MARIADB = "mariadb"
    MARIADB_SPATIAL = "mariadb_spatial"


class RelationKind(Enum):
    """Cardinality of a declared relationship."""

    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"
