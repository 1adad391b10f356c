"""Unit tests for MappingConfig."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from row_orm.core.config import MappingConfig


class TestMappingConfig:
    def test_defaults(self, generic_config: MappingConfig) -> None:
        assert generic_config.dialect == "generic"
        assert generic_config.strict is False
        assert generic_config.resolver_workers == 4
        assert generic_config.aliases == {}

    def test_dialect_normalized(self) -> None:
        assert MappingConfig(dialect="PostGIS").dialect == "postgis"

    def test_unknown_dialect(self) -> None:
        with pytest.raises(ValidationError, match="unknown dialect"):
            MappingConfig(dialect="oracle")

    def test_workers_at_least_one(self) -> None:
        with pytest.raises(ValidationError):
            MappingConfig(resolver_workers=0)

    def test_type_registrations(self) -> None:
        class Marker:
            pass

        config = MappingConfig(json_types=[Marker], composite_types={Marker: "marker"})
        assert config.json_types == [Marker]
        assert config.composite_types == {Marker: "marker"}
