"""Integration test for the SQLite round trip.

Covers: parameter binding, row cursors, model mapping, repository lookups
and relationship resolution end-to-end against a real SQLite in-memory
database.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pytest

from row_orm.core.cursor import rows_from_cursor
from row_orm.core.entity import EntityMixin
from row_orm.mapping.model import ModelMapper, ParameterBinder
from row_orm.relations.builder import relations
from row_orm.relations.metadata import RelationshipTable
from row_orm.relations.resolver import RelationshipResolver
from row_orm.repository.base import Repository
from row_orm.types.registry import TypeMapperRegistry

# --- Test models ---


class Tier(Enum):
    FREE = "free"
    PRO = "pro"


@dataclass
class Preferences:
    theme: str
    compact: bool = False


@dataclass
class Contact:
    id: int
    user_id: int
    email: str


@dataclass
class User(EntityMixin):
    id: int
    name: str
    tier: Tier
    ref: uuid.UUID
    prefs: Preferences | None = None
    contacts: list[Contact] = field(default_factory=list)


@dataclass
class Team:
    id: int
    name: str


@dataclass
class Member:
    id: int
    name: str
    team_id: int | None
    team: Team | None = None


QUERIES = {
    "user.list": "SELECT id, name, tier, ref, prefs FROM users ORDER BY id",
    "contact.find_by_user_id": (
        "SELECT id, user_id, email FROM contacts WHERE user_id = :user_id ORDER BY id"
    ),
    "member.list": "SELECT id, name, team_id FROM members ORDER BY id",
    "member.list_with_team": (
        'SELECT m.id, m.name, m.team_id, t.id AS "team.id", t.name AS "team.name" '
        "FROM members m LEFT JOIN teams t ON t.id = m.team_id ORDER BY m.id"
    ),
    "team.find_by_id": "SELECT id, name FROM teams WHERE id = :id",
}


class SqliteEngine:
    """Minimal named-query executor standing in for the query layer."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def fetch_all(self, query_name: str, params: dict[str, Any] | None = None, mapper=None):
        cursor = self.conn.execute(QUERIES[query_name], params or {})
        rows = rows_from_cursor(cursor)
        return mapper.map_many(rows) if mapper is not None else [r.as_dict() for r in rows]

    def insert(self, table: str, binder: ParameterBinder, entity: Any) -> None:
        bound = binder.bind(entity)
        columns = ", ".join(bound.names)
        placeholders = ", ".join(bound.placeholders.values())
        self.conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", bound.values
        )


class ContactRepository(Repository[Contact]):
    entity_type = Contact


class TeamRepository(Repository[Team]):
    entity_type = Team


# --- Fixtures ---


@pytest.fixture
def engine():
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, tier TEXT, ref TEXT, prefs TEXT)"
    )
    conn.execute("CREATE TABLE contacts (id INTEGER PRIMARY KEY, user_id INTEGER, email TEXT)")
    conn.execute("CREATE TABLE teams (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("CREATE TABLE members (id INTEGER PRIMARY KEY, name TEXT, team_id INTEGER)")
    yield SqliteEngine(conn)
    conn.close()


@pytest.fixture
def registry() -> TypeMapperRegistry:
    registry = TypeMapperRegistry("generic")
    registry.register_json_type(Preferences)
    registry.freeze()
    return registry


@pytest.fixture
def table(engine) -> RelationshipTable:
    table = RelationshipTable()
    relations(User).one_to_many(
        "contacts", foreign_key="user_id", repository=ContactRepository(engine)
    ).register(table)
    table.freeze()
    return table


class TestSqliteRoundTrip:
    def test_users_with_contacts(self, engine, registry, table) -> None:
        user_binder = ParameterBinder(User, registry=registry, relations=table)
        contact_binder = ParameterBinder(Contact, registry=registry)

        ada = User(1, "Ada", Tier.PRO, uuid.uuid4(), Preferences("dark"))
        bob = User(2, "Bob", Tier.FREE, uuid.uuid4())
        for user in (ada, bob):
            engine.insert("users", user_binder, user)
        for contact in (Contact(11, 1, "ada@work"), Contact(10, 1, "ada@home")):
            engine.insert("contacts", contact_binder, contact)

        resolver = RelationshipResolver(table, max_workers=1)
        mapper = ModelMapper(User, registry=registry, resolver=resolver)
        users = engine.fetch_all("user.list", mapper=mapper)

        assert [u.name for u in users] == ["Ada", "Bob"]
        assert users[0].tier is Tier.PRO
        assert users[0].ref == ada.ref
        assert users[0].prefs == Preferences("dark")
        assert users[1].prefs is None
        assert [c.email for c in users[0].contacts] == ["ada@home", "ada@work"]
        assert users[1].contacts == []

    def test_stored_representation(self, engine, registry, table) -> None:
        binder = ParameterBinder(User, registry=registry, relations=table)
        ref = uuid.UUID("12345678-1234-5678-1234-567812345678")
        engine.insert("users", binder, User(1, "Ada", Tier.PRO, ref, Preferences("light")))

        (row,) = engine.fetch_all("user.list")
        assert row["tier"] == "PRO"
        assert row["ref"] == "12345678-1234-5678-1234-567812345678"
        assert row["prefs"] == '{"theme":"light","compact":false}'


class TestSqliteManyToOne:
    @pytest.fixture
    def members(self, engine) -> RelationshipTable:
        table = RelationshipTable()
        relations(Member).many_to_one(
            "team", foreign_key="team_id", repository=TeamRepository(engine)
        ).register(table)
        engine.conn.execute("INSERT INTO teams (id, name) VALUES (1, 'Reds')")
        engine.conn.executemany(
            "INSERT INTO members (id, name, team_id) VALUES (?, ?, ?)",
            [(1, "Ana", 1), (2, "Rui", None)],
        )
        return table

    def test_left_join_columns(self, engine, members) -> None:
        mapper = ModelMapper(Member, relations=members)
        ana, rui = engine.fetch_all("member.list_with_team", mapper=mapper)
        assert ana.team == Team(1, "Reds")
        assert rui.team is None

    def test_resolved_by_lookup(self, engine, members) -> None:
        mapper = ModelMapper(Member, resolver=RelationshipResolver(members, max_workers=1))
        ana, rui = engine.fetch_all("member.list", mapper=mapper)
        assert ana.team == Team(1, "Reds")
        assert rui.team is None
