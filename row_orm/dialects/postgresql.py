"""PostgreSQL dialect - native enums, uuid, jsonb and composite types (psycopg v3+)."""

from __future__ import annotations

import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from row_orm.core.exceptions import ConversionError, MalformedLiteralError, UnsupportedTypeError
from row_orm.core.introspect import field_names
from row_orm.core.params import named_placeholder
from row_orm.dialects.base import ChainedDialect, is_enum_type
from row_orm.dialects.generic import GenericDialect
from row_orm.dialects.protocol import Dialect
from row_orm.types.default import EnumStringMapper, JsonTypeMapper, UuidTypeMapper
from row_orm.types.protocol import BaseTypeMapper, TypeMapper

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


def cast_placeholder(param_name: str, db_type_name: str) -> str:
    """``(:name)::db_type`` - explicit server-side cast of a bound parameter."""
    return f"({named_placeholder(param_name)})::{db_type_name}"


class PostgresEnumMapper(EnumStringMapper[E]):
    """Enum stored in a native PostgreSQL enum column."""

    def __init__(self, enum_class: type[E], db_type_name: str) -> None:
        super().__init__(enum_class)
        self.db_type_name = db_type_name

    def format_parameter(self, param_name: str) -> str:
        return cast_placeholder(param_name, self.db_type_name)


class PostgresUuidMapper(UuidTypeMapper):
    """UUID bound natively; psycopg adapts uuid.UUID to the uuid type."""

    def dump(self, value: uuid.UUID) -> Any:
        if not isinstance(value, uuid.UUID):
            raise UnsupportedTypeError(type(value))
        return value

    def format_parameter(self, param_name: str) -> str:
        return cast_placeholder(param_name, "uuid")


class PostgresJsonMapper(JsonTypeMapper[T]):
    """Registered type stored in a json/jsonb column.

    psycopg already decodes json/jsonb to dicts and lists on read; on write
    the value is wrapped in ``psycopg.types.json.Jsonb``.
    """

    def dump(self, value: T) -> Any:
        from psycopg.types.json import Jsonb

        return Jsonb(self.dump_python(value))


def parse_row_literal(literal: str) -> list[str | None]:
    """Split a PostgreSQL row literal ``(a,"b c",,3)`` into field texts.

    Unquoted empty fields are NULL (None); quoted fields honour backslash
    escapes and doubled quotes.
    """
    text = literal.strip()
    if len(text) < 2 or text[0] != "(" or text[-1] != ")":
        raise MalformedLiteralError(literal, "composite row")
    body = text[1:-1]

    fields: list[str | None] = []
    buf: list[str] = []
    quoted = False
    in_quotes = False
    i = 0
    while i < len(body):
        ch = body[i]
        if in_quotes:
            if ch == "\\" and i + 1 < len(body):
                buf.append(body[i + 1])
                i += 2
                continue
            if ch == '"':
                if i + 1 < len(body) and body[i + 1] == '"':
                    buf.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                buf.append(ch)
        elif ch == '"':
            in_quotes = quoted = True
        elif ch == ",":
            fields.append("".join(buf) if buf or quoted else None)
            buf, quoted = [], False
        else:
            buf.append(ch)
        i += 1

    if in_quotes:
        raise MalformedLiteralError(literal, "composite row")
    fields.append("".join(buf) if buf or quoted else None)
    return fields


def _quote_field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "t" if value else "f"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    text = value.name if isinstance(value, Enum) else str(value)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class PostgresCompositeMapper(BaseTypeMapper[T]):
    """Dataclass or Pydantic model stored in a composite (row) type column."""

    def __init__(self, composite_class: type[T], db_type_name: str) -> None:
        self.target_type = composite_class
        self.db_type_name = db_type_name
        self._fields = field_names(composite_class)
        self._adapter: TypeAdapter[T] = TypeAdapter(composite_class)

    def load(self, value: Any) -> T:
        if isinstance(value, self.target_type):
            return value
        if isinstance(value, str):
            values: list[Any] = parse_row_literal(value)
        elif isinstance(value, (tuple, list)):
            values = list(value)
        else:
            raise UnsupportedTypeError(type(value))

        if len(values) != len(self._fields):
            raise ConversionError(
                None,
                self.target_type,
                f"expected {len(self._fields)} fields, got {len(values)}",
            )
        try:
            return self._adapter.validate_python(dict(zip(self._fields, values, strict=True)))
        except ValidationError as e:
            raise ConversionError(None, self.target_type, str(e)) from e

    def dump(self, value: T) -> str:
        if not isinstance(value, self.target_type):
            raise UnsupportedTypeError(type(value))
        return "(" + ",".join(_quote_field(getattr(value, name)) for name in self._fields) + ")"

    def format_parameter(self, param_name: str) -> str:
        return cast_placeholder(param_name, self.db_type_name)


class PostgresDialect(ChainedDialect):
    """PostgreSQL dialect; delegates to the generic dialect."""

    name = "postgresql"

    def __init__(self, next_dialect: Dialect | None = None) -> None:
        super().__init__(next_dialect if next_dialect is not None else GenericDialect())

    def own_mapper_for(self, python_type: Any) -> TypeMapper[Any] | None:
        composite = self.composite_type_name(python_type)
        if composite is not None:
            return PostgresCompositeMapper(python_type, composite)
        if is_enum_type(python_type):
            db_type_name = self.enum_type_name(python_type)
            if db_type_name is not None:
                return PostgresEnumMapper(python_type, db_type_name)
            return None
        if self.is_json_type(python_type):
            return PostgresJsonMapper(python_type)
        if python_type is uuid.UUID:
            return PostgresUuidMapper()
        return None
