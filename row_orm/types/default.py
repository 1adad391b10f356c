"""Generic type mappers shared by every dialect."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from row_orm.core.exceptions import ConversionError, MalformedLiteralError, UnsupportedTypeError
from row_orm.types.protocol import BaseTypeMapper
from row_orm.types.values import classify, normalize

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class DefaultTypeMapper(BaseTypeMapper[Any]):
    """Fallback mapper for every type without a dedicated mapper.

    Values pass through unchanged, except whole-number Decimals which are
    narrowed to int when they fit in 64 bits. Values outside the known
    database shapes raise UnsupportedTypeError.
    """

    def __init__(self, target_type: Any = object) -> None:
        self.target_type = target_type

    def load(self, value: Any) -> Any:
        return normalize(value)

    def dump(self, value: Any) -> Any:
        classify(value)
        return value


DEFAULT_MAPPER = DefaultTypeMapper()


class EnumStringMapper(BaseTypeMapper[E]):
    """Stores enum members by name in a text column."""

    def __init__(self, enum_class: type[E]) -> None:
        self.target_type = enum_class

    def load(self, value: Any) -> E:
        enum_class = self.target_type
        if isinstance(value, enum_class):
            return value
        if not isinstance(value, str):
            raise UnsupportedTypeError(type(value))
        try:
            return enum_class[value]
        except KeyError:
            pass
        try:
            return enum_class(value)
        except ValueError as e:
            raise ConversionError(
                None, enum_class, f"invalid value {value!r} for {enum_class.__name__}"
            ) from e

    def dump(self, value: E) -> str:
        if not isinstance(value, self.target_type):
            raise UnsupportedTypeError(type(value))
        return value.name


class UuidTypeMapper(BaseTypeMapper[uuid.UUID]):
    """Stores UUIDs as canonical text."""

    target_type = uuid.UUID

    def load(self, value: Any) -> uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        if isinstance(value, str):
            try:
                return uuid.UUID(value)
            except ValueError as e:
                raise MalformedLiteralError(value, "UUID") from e
        if isinstance(value, (bytes, bytearray)) and len(value) == 16:
            return uuid.UUID(bytes=bytes(value))
        raise UnsupportedTypeError(type(value))

    def dump(self, value: uuid.UUID) -> Any:
        if not isinstance(value, uuid.UUID):
            raise UnsupportedTypeError(type(value))
        return str(value)


class JsonTypeMapper(BaseTypeMapper[T]):
    """Stores a registered type as JSON text.

    Serialization goes through a Pydantic TypeAdapter, so dataclasses,
    Pydantic models, TypedDicts and plain containers all work.
    """

    def __init__(self, json_type: type[T]) -> None:
        self.target_type = json_type
        self._adapter: TypeAdapter[T] = TypeAdapter(json_type)

    def load(self, value: Any) -> T:
        try:
            if isinstance(value, (str, bytes, bytearray)):
                if not value:
                    raise ConversionError(None, self.target_type, "empty JSON document")
                return self._adapter.validate_json(value)
            if isinstance(value, (dict, list)):
                return self._adapter.validate_python(value)
        except ValidationError as e:
            raise ConversionError(None, self.target_type, f"invalid JSON document: {e}") from e
        raise UnsupportedTypeError(type(value))

    def dump(self, value: T) -> Any:
        return self._adapter.dump_json(value).decode("utf-8")

    def dump_python(self, value: T) -> Any:
        """JSON-compatible Python structure for *value*."""
        return self._adapter.dump_python(value, mode="json")
