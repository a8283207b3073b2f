"""
Shared test fixtures.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ormysql.adapters.mysql import MySQLAdapter, QueryOutcome
from ormysql.core.types import ModelSchema

# === Test Models ===

USER_SCHEMA = {
    "name": "User",
    "table": "users",
    "properties": {
        "name": {"type": "string", "nullable": False, "index": True},
        "email": {"type": "string", "limit": 120, "index": {"kind": "UNIQUE"}},
        "bio": {"type": "text"},
        "age": {"type": "number"},
        "active": {"type": "boolean"},
        "joined_at": {"type": "date"},
        "settings": {"type": "json"},
    },
    "indexes": {
        "name_age": {"columns": ["name", "age"], "type": "BTREE"},
    },
}

EMPTY_SCHEMA = {"name": "Counter", "properties": {}}


@pytest.fixture
def user_model() -> ModelSchema:
    return ModelSchema.model_validate(USER_SCHEMA)


@pytest.fixture
def empty_model() -> ModelSchema:
    return ModelSchema.model_validate(EMPTY_SCHEMA)


# === Fake executor ===


class FakeExecutor:
    """
    Records every statement and answers from a responder.

    The responder receives the SQL text and returns a QueryOutcome, or
    raises to simulate a driver failure.
    """

    def __init__(self, responder: Callable[[str], QueryOutcome] | None = None) -> None:
        self.statements: list[str] = []
        self.responder = responder or (lambda sql: QueryOutcome())

    async def query(self, sql: str) -> QueryOutcome:
        self.statements.append(sql)
        return self.responder(sql)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def adapter(executor, user_model, empty_model) -> MySQLAdapter:
    adapter = MySQLAdapter(executor)
    adapter.define(user_model)
    adapter.define(empty_model)
    return adapter


def field_row(name: str, type: str, null: str = "YES") -> dict:
    """A row shaped like SHOW FIELDS output."""
    return {"Field": name, "Type": type, "Null": null, "Key": "", "Default": None, "Extra": ""}


def index_row(key: str, seq: int, column: str) -> dict:
    """A row shaped like SHOW INDEXES output."""
    return {"Key_name": key, "Seq_in_index": seq, "Column_name": column, "Non_unique": 1}


def live_rows_for(model: ModelSchema) -> tuple[list[dict], list[dict]]:
    """SHOW FIELDS / SHOW INDEXES rows describing a table that matches `model`."""
    from ormysql.adapters.mysql.statements import datatype

    fields = [field_row("id", "int(11)", "NO")]
    indexes = [index_row("PRIMARY", 1, "id")]
    for name, prop in model.active_properties.items():
        fields.append(field_row(name, datatype(prop).lower(), "YES" if prop.nullable else "NO"))
        if prop.index is not None:
            indexes.append(index_row(name, 1, name))
    for name, index in model.active_indexes.items():
        for seq, column in enumerate(index.columns, start=1):
            indexes.append(index_row(name, seq, column))
    return fields, indexes


@pytest.fixture
def make_executor() -> type[FakeExecutor]:
    return FakeExecutor


@pytest.fixture
def live_rows() -> Callable[[ModelSchema], tuple[list[dict], list[dict]]]:
    return live_rows_for


@pytest.fixture
def rows() -> dict[str, Callable[..., dict]]:
    return {"field": field_row, "index": index_row}
