"""RowORM exception hierarchy.

All exceptions are RowORM-specific. Driver and repository exceptions are
never exposed directly; they are chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class RowOrmError(Exception):
    """Base exception for all RowORM errors."""


# --- Registry ---


class RegistryError(RowOrmError):
    """Raised on invalid type mapper registry operations."""


class DialectError(RowOrmError):
    """Raised when a dialect cannot be found or loaded."""


# --- Mapping ---


class MappingError(RowOrmError):
    """Base for mapping errors."""


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", str(target_type))


class ConversionError(MappingError):
    """Raised when a column value cannot be converted to or from a type."""

    def __init__(self, column: str | None, target_type: Any, detail: str) -> None:
        self.column = column
        self.target_type = target_type
        self.detail = detail
        where = f"column '{column}'" if column is not None else "parameter value"
        super().__init__(f"Cannot convert {where} to {_type_name(target_type)}: {detail}")


class UnsupportedTypeError(MappingError):
    """Raised when no mapper can handle a value's runtime shape."""

    def __init__(self, value_type: type, column: str | None = None) -> None:
        self.value_type = value_type
        self.column = column
        suffix = f" in column '{column}'" if column is not None else ""
        super().__init__(f"Unsupported value type {value_type.__name__}{suffix}")


class MalformedLiteralError(ConversionError):
    """Raised when a dialect literal fails its grammar (e.g. invalid WKT)."""

    def __init__(self, literal: str, grammar: str, column: str | None = None) -> None:
        self.literal = literal
        self.grammar = grammar
        super().__init__(column, grammar, f"malformed {grammar} literal {literal!r}")


class RelationshipResolutionError(MappingError):
    """Raised when a relationship field cannot be resolved."""

    def __init__(self, entity_type: type, field_name: str, detail: str) -> None:
        self.entity_type = entity_type
        self.field_name = field_name
        super().__init__(
            f"Cannot resolve relationship {entity_type.__name__}.{field_name}: {detail}"
        )


class ColumnMismatchError(MappingError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


class PlanCompilationError(MappingError):
    """Raised when a relationship declaration fails validation during build()."""
