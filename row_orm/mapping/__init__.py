"""Mapping layer - transform rows into typed entities and back into parameters."""

from __future__ import annotations

from row_orm.mapping.model import BoundParameters, ModelMapper, ParameterBinder
from row_orm.mapping.protocol import Mapper

__all__ = [
    "Mapper",
    "ModelMapper",
    "ParameterBinder",
    "BoundParameters",
]
