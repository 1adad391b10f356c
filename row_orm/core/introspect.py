"""Field introspection for dataclasses, Pydantic models and plain classes."""

from __future__ import annotations

import dataclasses
import inspect
import re
import typing
from collections import abc
from typing import Any

from pydantic import BaseModel

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEQUENCE_ORIGINS = (list, tuple, abc.Sequence, abc.MutableSequence)


def is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def field_names(cls: type) -> list[str]:
    """Extract field names from a class (dataclass, Pydantic, or plain)."""
    if is_pydantic_model(cls):
        return list(cls.model_fields.keys())  # type: ignore[attr-defined]

    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
        return [
            name
            for name, param in sig.parameters.items()
            if name != "self" and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
        ]
    except (ValueError, TypeError):
        return []


def field_types(cls: type) -> dict[str, Any]:
    """Declared field types, keyed by field name, in declaration order.

    Optional[X] / X | None is unwrapped to X. Fields without an
    annotation map to ``object``.
    """
    names = field_names(cls)
    if is_pydantic_model(cls):
        fields = cls.model_fields  # type: ignore[attr-defined]
        return {name: unwrap_optional(fields[name].annotation) for name in names}
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
    if not hints and not dataclasses.is_dataclass(cls):
        try:
            hints = typing.get_type_hints(cls.__init__)  # type: ignore[misc]
        except (NameError, TypeError):
            hints = {}
    return {name: unwrap_optional(hints.get(name, object)) for name in names}


def unwrap_optional(annotation: Any) -> Any:
    """X | None -> X; other annotations are returned unchanged."""
    args = typing.get_args(annotation)
    if args and type(None) in args:
        remaining = [arg for arg in args if arg is not type(None)]
        if len(remaining) == 1:
            return remaining[0]
    return annotation


def collection_element_type(annotation: Any) -> Any | None:
    """Element type of list[X] / Sequence[X] style annotations, else None."""
    if typing.get_origin(annotation) in _SEQUENCE_ORIGINS:
        args = typing.get_args(annotation)
        if args:
            return args[0]
    return None


def snake_case(name: str) -> str:
    """CamelCase -> camel_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def required_field_names(cls: type) -> set[str]:
    """Names of fields that have no default value."""
    if is_pydantic_model(cls):
        return {
            name
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
            if info.is_required()
        }

    if dataclasses.is_dataclass(cls):
        return {
            f.name
            for f in dataclasses.fields(cls)
            if f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        }

    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return set()
    return {
        name
        for name, param in sig.parameters.items()
        if name != "self"
        and param.default is inspect.Parameter.empty
        and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
    }
