"""Dialects - per-database type mapping chains."""

from __future__ import annotations

import importlib
import logging

from row_orm.core.enums import DialectName
from row_orm.core.exceptions import DialectError
from row_orm.dialects.base import ChainedDialect
from row_orm.dialects.protocol import Dialect

logger = logging.getLogger(__name__)

# Dialect name -> (module_path, class_name)
_DIALECT_MAP: dict[str, tuple[str, str]] = {
    DialectName.GENERIC.value: ("row_orm.dialects.generic", "GenericDialect"),
    DialectName.POSTGRESQL.value: ("row_orm.dialects.postgresql", "PostgresDialect"),
    DialectName.POSTGIS.value: ("row_orm.dialects.postgis", "PostgisDialect"),
    DialectName.MYSQL.value: ("row_orm.dialects.mysql", "MySQLDialect"),
    DialectName.MYSQL_SPATIAL.value: ("row_orm.dialects.mysql", "MySQLSpatialDialect"),
    DialectName.MARIADB.value: ("row_orm.dialects.mariadb", "MariaDBDialect"),
    DialectName.MARIADB_SPATIAL.value: ("row_orm.dialects.mariadb", "MariaDBSpatialDialect"),
}


def load_dialect(name: str | DialectName) -> Dialect:
    """Instantiate a fresh dialect chain by name."""
    key = name.value if isinstance(name, DialectName) else name.lower()
    if key not in _DIALECT_MAP:
        raise DialectError(f"Unsupported dialect: {name}")

    module_path, cls_name = _DIALECT_MAP[key]
    try:
        module = importlib.import_module(module_path)
        dialect: Dialect = getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise DialectError(f"Failed to load dialect '{key}': {e}") from e
    logger.debug("Loaded dialect %r", dialect)
    return dialect


__all__ = [
    "ChainedDialect",
    "Dialect",
    "DialectName",
    "load_dialect",
]
