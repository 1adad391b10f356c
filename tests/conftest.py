"""Shared test fixtures."""

from __future__ import annotations

import pytest

from row_orm.core.config import MappingConfig
from row_orm.relations.metadata import RelationshipTable
from row_orm.types.registry import TypeMapperRegistry


@pytest.fixture
def generic_config() -> MappingConfig:
    """Generic-dialect mapping config."""
    return MappingConfig(dialect="generic")


@pytest.fixture
def relationship_table() -> RelationshipTable:
    """Empty relationship table."""
    return RelationshipTable()


@pytest.fixture
def registry_for():
    """Factory for a fresh registry on a given dialect.

    Usage:
        registry = registry_for("mysql_spatial")
    """

    def _make(dialect: str = "generic") -> TypeMapperRegistry:
        return TypeMapperRegistry(dialect)

    return _make
