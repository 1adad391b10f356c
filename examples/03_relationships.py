"""
Example 03: Relationships

This example demonstrates declaring a one-to-many relationship and
resolving it through a repository backed by SQLite.
"""

import sqlite3
from dataclasses import dataclass, field
from typing import Optional

from row_orm import (
    ModelMapper,
    RelationshipResolver,
    RelationshipTable,
    Repository,
    relations,
    rows_from_cursor,
)
from row_orm.core.entity import EntityMixin


@dataclass
class ContactInfo:
    """Contact entity"""
    id: int
    user_id: int
    email: str


@dataclass
class User(EntityMixin):
    """User entity"""
    id: Optional[int]
    name: str
    contacts: list[ContactInfo] = field(default_factory=list)


QUERIES = {
    "user.list": "SELECT id, name FROM users ORDER BY id",
    "contact_info.find_by_user_id": (
        "SELECT id, user_id, email FROM contacts WHERE user_id = :user_id ORDER BY id"
    ),
}


class SqliteEngine:
    """Runs named queries and maps the rows"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def fetch_all(self, query_name, params=None, mapper=None):
        rows = rows_from_cursor(self.conn.execute(QUERIES[query_name], params or {}))
        return mapper.map_many(rows)


class ContactRepository(Repository[ContactInfo]):
    """Repository for ContactInfo entities"""
    entity_type = ContactInfo


def main():
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    conn.execute("CREATE TABLE contacts (id INTEGER PRIMARY KEY, user_id INTEGER, email TEXT)")
    conn.execute("INSERT INTO users VALUES (42, 'Alice'), (43, 'Bob')")
    conn.execute(
        "INSERT INTO contacts VALUES (1, 42, 'alice@home.example'), (2, 42, 'alice@work.example')"
    )
    engine = SqliteEngine(conn)

    # Declare relationships once at startup
    table = RelationshipTable()
    relations(User).one_to_many(
        "contacts", foreign_key="user_id", repository=ContactRepository(engine)
    ).register(table)
    table.freeze()

    print("=== Relationships ===\n")

    # Lazy: resolve on demand
    print("1. Resolve on demand:")
    resolver = RelationshipResolver(table, max_workers=1)
    user = User(id=42, name="Alice")
    resolver.resolve(user, "contacts")
    for contact in user.contacts:
        print(f"   - {contact.email}")
    print()

    # Null id: no lookup at all
    print("2. Unsaved user:")
    draft = User(id=None, name="Draft")
    resolver.resolve(draft, "contacts")
    print(f"   contacts = {draft.contacts}\n")

    # Eager: resolve while mapping
    print("3. Eager loading:")
    user_mapper = ModelMapper(User, resolver=resolver)
    for u in engine.fetch_all("user.list", mapper=user_mapper):
        print(f"   {u.name}: {len(u.contacts)} contact(s)")
    print()

    conn.close()


if __name__ == "__main__":
    main()
