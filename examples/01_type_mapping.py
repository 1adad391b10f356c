"""
Example 01: Type Mapping

This example demonstrates how column values are converted per type and dialect.
"""

from decimal import Decimal

from row_orm import Point, TypeMapperRegistry
from row_orm.core.exceptions import MalformedLiteralError


def main():
    print("=== Type Mapping ===\n")

    # Default mapper: whole-number decimals become int
    print("1. Numeric normalization:")
    registry = TypeMapperRegistry("generic")
    mapper = registry.resolver_for(Decimal)
    for value in (Decimal("100"), Decimal("100.50"), Decimal(2**63)):
        result = mapper.map({"amount": value}, "amount")
        print(f"   {value!r:>28} -> {result!r}")
    print()

    # Spatial points differ per dialect
    print("2. Points per dialect:")
    point = Point(-73.985428, 40.748817, srid=4326)
    for dialect in ("mysql_spatial", "postgis"):
        point_mapper = TypeMapperRegistry(dialect).resolver_for(Point)
        print(f"   {dialect}:")
        print(f"     bind value:  {point_mapper.to_database(point)}")
        print(f"     placeholder: {point_mapper.format_parameter('location')}")
    print()

    # Malformed literals name the offending column
    print("3. Malformed literal:")
    point_mapper = TypeMapperRegistry("mysql_spatial").resolver_for(Point)
    try:
        point_mapper.map({"location": "NOT-A-POINT"}, "location")
    except MalformedLiteralError as e:
        print(f"   {e}\n")


if __name__ == "__main__":
    main()
