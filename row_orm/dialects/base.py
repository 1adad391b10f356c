"""Chain-of-responsibility base for dialects."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any

from row_orm.core.introspect import snake_case
from row_orm.dialects.protocol import Dialect
from row_orm.types.protocol import TypeMapper

logger = logging.getLogger(__name__)


class ChainedDialect:
    """Base dialect holding type registrations and the link to the next dialect.

    Registrations propagate down the chain so every dialect sees the same
    declarations. Registration tables are replaced, never mutated, so
    concurrent ``mapper_for`` calls never observe a partial update.

    Example chain:
        PostgisDialect -> PostgresDialect -> GenericDialect
    """

    name = "chained"
    supports_composite_types = True

    def __init__(self, next_dialect: Dialect | None = None) -> None:
        self.next_dialect = next_dialect
        self._lock = threading.Lock()
        self._enum_types: dict[type, str] = {}
        self._json_types: frozenset[type] = frozenset()
        self._composite_types: dict[type, str] = {}

    def register_enum_type(self, enum_class: type[Enum], db_type_name: str | None = None) -> None:
        db_type_name = db_type_name or snake_case(enum_class.__name__)
        with self._lock:
            self._enum_types = {**self._enum_types, enum_class: db_type_name}
        logger.debug("%s: enum %s -> %s", self.name, enum_class.__name__, db_type_name)
        if self.next_dialect is not None:
            self.next_dialect.register_enum_type(enum_class, db_type_name)

    def register_json_type(self, json_class: type) -> None:
        with self._lock:
            self._json_types = self._json_types | {json_class}
        logger.debug("%s: json type %s", self.name, json_class.__name__)
        if self.next_dialect is not None:
            self.next_dialect.register_json_type(json_class)

    def register_composite_type(self, composite_class: type, db_type_name: str) -> None:
        with self._lock:
            self._composite_types = {**self._composite_types, composite_class: db_type_name}
        logger.debug("%s: composite %s -> %s", self.name, composite_class.__name__, db_type_name)
        if self.next_dialect is not None:
            self.next_dialect.register_composite_type(composite_class, db_type_name)

    def enum_type_name(self, enum_class: type) -> str | None:
        return self._enum_types.get(enum_class)

    def is_json_type(self, python_type: Any) -> bool:
        return python_type in self._json_types

    def composite_type_name(self, python_type: Any) -> str | None:
        return self._composite_types.get(python_type)

    def mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        mapper = self.own_mapper_for(python_type)
        if mapper is not None:
            return mapper
        if self.next_dialect is not None:
            return self.next_dialect.mapper_for(python_type)
        return None

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        """Mapper this dialect itself provides for *python_type*, if any."""
        return None

    def __repr__(self) -> str:
        chain = [self.name]
        nxt = self.next_dialect
        while nxt is not None:
            chain.append(nxt.name)
            nxt = getattr(nxt, "next_dialect", None)
        return f"{type(self).__name__}({' -> '.join(chain)})"


def is_enum_type(python_type: Any) -> bool:
    # list[X] passes isinstance(..., type) but is rejected by issubclass
    try:
        return isinstance(python_type, type) and issubclass(python_type, Enum)
    except TypeError:
        return False
