"""Type mapper registry.

Resolves the TypeMapper for a (python type, dialect) pair:

    1. explicit registration for (type, dialect)
    2. explicit registration for (type, any dialect)
    3. the dialect chain (enums, JSON, composite, UUID, Point, ...)
    4. the default mapper

The registry is populated at startup and read-mostly afterwards. Every
mutation swaps in a new table under a lock; lookups read the current
table reference without locking. Enum, JSON and composite declarations
are recorded and replayed on every dialect, including dialects added or
first looked up later.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from row_orm.core.enums import DialectName
from row_orm.core.exceptions import DialectError, RegistryError
from row_orm.dialects import load_dialect
from row_orm.dialects.protocol import Dialect
from row_orm.types.default import DEFAULT_MAPPER
from row_orm.types.protocol import TypeMapper

if TYPE_CHECKING:
    from row_orm.core.config import MappingConfig

logger = logging.getLogger(__name__)

_Key = tuple[Any, "str | None"]
_Declaration = Callable[[Dialect], None]


def _dialect_tag(dialect: str | DialectName | Dialect) -> str:
    if isinstance(dialect, DialectName):
        return dialect.value
    if isinstance(dialect, str):
        return dialect.lower()
    return dialect.name


class TypeMapperRegistry:
    """Lookup table from (type, dialect) to exactly one TypeMapper.

    Args:
        dialect: Default dialect (name or instance). Defaults to 'generic'.
        default_mapper: Mapper used when nothing more specific resolves.
    """

    def __init__(
        self,
        dialect: str | DialectName | Dialect | None = None,
        default_mapper: TypeMapper[Any] = DEFAULT_MAPPER,
    ) -> None:
        self._lock = threading.RLock()
        self._frozen = False
        self._default_mapper = default_mapper
        self._mappers: dict[_Key, TypeMapper[Any]] = {}
        self._resolved: dict[_Key, TypeMapper[Any]] = {}
        self._generation = 0
        self._dialects: dict[str, Dialect] = {}
        self._declarations: tuple[_Declaration, ...] = ()
        self._composite_names: tuple[str, ...] = ()
        self._default_dialect = self.add_dialect(
            dialect if dialect is not None else DialectName.GENERIC
        )

    @classmethod
    def from_config(cls, config: MappingConfig) -> TypeMapperRegistry:
        """Build and freeze a registry from a MappingConfig."""
        registry = cls(config.dialect)
        for enum_class, db_type_name in config.enum_types.items():
            registry.register_enum_type(enum_class, db_type_name)
        for json_class in config.json_types:
            registry.register_json_type(json_class)
        for composite_class, db_type_name in config.composite_types.items():
            registry.register_composite_type(composite_class, db_type_name)
        registry.freeze()
        return registry

    # --- Registration ---

    def add_dialect(self, dialect: str | DialectName | Dialect) -> str:
        """Make a dialect available for lookups; returns its tag.

        Recorded enum, JSON and composite declarations are replayed on it.

        Raises:
            RegistryError: If the registry is frozen.
            DialectError: If the dialect cannot honor a recorded declaration.
        """
        with self._lock:
            self._check_mutable()
            return self._attach(dialect)

    def register(
        self,
        python_type: Any,
        mapper: TypeMapper[Any],
        dialect: str | DialectName | None = None,
    ) -> None:
        """Register *mapper* for *python_type*, optionally for one dialect only.

        Raises:
            RegistryError: If the registry is frozen or the pair is taken.
        """
        key = (python_type, _dialect_tag(dialect) if dialect is not None else None)
        with self._lock:
            self._check_mutable()
            if key in self._mappers:
                raise RegistryError(
                    f"A mapper is already registered for {_type_label(python_type)} "
                    f"(dialect={key[1] or '*'})"
                )
            self._mappers = {**self._mappers, key: mapper}
            self._invalidate()
        logger.debug(
            "Registered %r for %s (dialect=%s)", mapper, _type_label(python_type), key[1] or "*"
        )

    def register_enum_type(self, enum_class: type[Enum], db_type_name: str | None = None) -> None:
        """Declare a native enum type on every dialect."""
        self._declare(lambda d: d.register_enum_type(enum_class, db_type_name))

    def register_json_type(self, json_class: type) -> None:
        """Declare a JSON-stored type on every dialect."""
        self._declare(lambda d: d.register_json_type(json_class))

    def register_composite_type(self, composite_class: type, db_type_name: str) -> None:
        """Declare a composite type on every dialect.

        Raises:
            DialectError: If any registered dialect has no composite types.
                No dialect is changed in that case.
        """
        with self._lock:
            self._check_mutable()
            unsupported = sorted(
                tag for tag, d in self._dialects.items() if not d.supports_composite_types
            )
            if unsupported:
                raise DialectError(
                    f"{', '.join(unsupported)} cannot store composite type "
                    f"{composite_class.__name__}; use a JSON column instead"
                )
            self._declare(lambda d: d.register_composite_type(composite_class, db_type_name))
            self._composite_names = (*self._composite_names, composite_class.__name__)

    def freeze(self) -> None:
        """Reject any further registration."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --- Lookup ---

    @property
    def default_dialect(self) -> str:
        return self._default_dialect

    def dialect(self, name: str | DialectName | None = None) -> Dialect:
        """Return the dialect for *name*, loading a known dialect on first use.

        Raises:
            DialectError: If *name* is not a known dialect.
        """
        tag = _dialect_tag(name) if name is not None else self._default_dialect
        dialect = self._dialects.get(tag)
        if dialect is not None:
            return dialect
        with self._lock:
            if tag not in self._dialects:
                self._attach(tag)
            return self._dialects[tag]

    def resolver_for(
        self,
        python_type: Any,
        dialect: str | DialectName | None = None,
    ) -> TypeMapper[Any]:
        """Return the single TypeMapper for *python_type* under *dialect*."""
        tag = _dialect_tag(dialect) if dialect is not None else self._default_dialect
        key = (python_type, tag)
        resolved = self._resolved.get(key)
        if resolved is not None:
            return resolved

        dialect_chain = self.dialect(tag)
        generation = self._generation
        mappers = self._mappers
        mapper = mappers.get(key) or mappers.get((python_type, None))
        if mapper is None:
            mapper = dialect_chain.mapper_for(python_type)
        if mapper is None:
            mapper = self._default_mapper

        with self._lock:
            # a registration since the lookup started makes this result stale
            if self._generation == generation:
                self._resolved = {**self._resolved, key: mapper}
        return mapper

    # --- Internals ---

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryError("Type mapper registry is frozen")

    def _attach(self, dialect: str | DialectName | Dialect) -> str:
        # caller holds the lock
        instance = load_dialect(dialect) if isinstance(dialect, (str, DialectName)) else dialect
        if self._composite_names and not instance.supports_composite_types:
            raise DialectError(
                f"{instance.name} cannot store composite types "
                f"{', '.join(self._composite_names)}"
            )
        for declaration in self._declarations:
            declaration(instance)
        tag = _dialect_tag(instance)
        self._dialects = {**self._dialects, tag: instance}
        self._invalidate()
        return tag

    def _declare(self, declaration: _Declaration) -> None:
        with self._lock:
            self._check_mutable()
            try:
                for dialect in self._dialects.values():
                    declaration(dialect)
            finally:
                self._invalidate()
            self._declarations = (*self._declarations, declaration)

    def _invalidate(self) -> None:
        # caller holds the lock
        self._resolved = {}
        self._generation += 1


def _type_label(python_type: Any) -> str:
    return getattr(python_type, "__name__", repr(python_type))
