"""
Example 02: Model Mapping

This example demonstrates mapping rows to entities and binding entities back
into statement parameters, driven by a MappingConfig.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from row_orm import MappingConfig, ModelMapper, ParameterBinder, Point, TypeMapperRegistry


class Status(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Store:
    """Store entity"""
    id: int
    name: str
    status: Status
    ref: uuid.UUID
    location: Optional[Point] = None


def main():
    config = MappingConfig(
        dialect="postgis",
        aliases={"store_name": "name"},
        enum_types={Status: "store_status"},
    )
    registry = TypeMapperRegistry.from_config(config)

    print("=== Model Mapping ===\n")

    # Row -> entity
    print("1. Map a row:")
    mapper = ModelMapper.from_config(Store, config, registry=registry)
    row = {
        "id": 1,
        "store_name": "Midtown",
        "status": "OPEN",
        "ref": "0b7e7dee-87b9-4a6f-8f2d-0f3b4c6c9a11",
        "location": "SRID=4326;POINT(-73.985428 40.748817)",
    }
    store = mapper.map_one(row)
    print(f"   {store}\n")

    # Entity -> parameters
    print("2. Bind an entity (psycopg pyformat):")
    binder = ParameterBinder(Store, registry=registry, paramstyle="pyformat")
    bound = binder.bind(store)
    columns = ", ".join(bound.names)
    values = ", ".join(bound.placeholders.values())
    print(f"   INSERT INTO stores ({columns})")
    print(f"   VALUES ({values})")
    for name, value in bound.values.items():
        print(f"   - {name} = {value!r}")
    print()


if __name__ == "__main__":
    main()
