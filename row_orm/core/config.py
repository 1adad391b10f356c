"""Mapping configuration.

MappingConfig is a Pydantic model for type-safe engine configuration.
It is read once at startup to build the type mapper registry.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from row_orm.core.enums import DialectName


class MappingConfig(BaseModel):
    """Configuration for the mapping engine."""

    dialect: str = DialectName.GENERIC.value
    strict: bool = False
    resolver_workers: int = Field(default=4, ge=1)
    aliases: dict[str, str] = {}
    enum_types: dict[type, str | None] = {}
    json_types: list[type] = []
    composite_types: dict[type, str] = {}

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        value = value.lower()
        known = {d.value for d in DialectName}
        if value not in known:
            raise ValueError(f"unknown dialect '{value}', expected one of {sorted(known)}")
        return value
