"""
Abstract base adapter interface.

This is the surface the host ORM calls. Dialect adapters implement it on
top of their own codec, compiler, statement builder and schema differ.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ormysql.core.dsl import Filter
from ormysql.core.registry import SchemaRegistry
from ormysql.core.types import ModelSchema


@dataclass
class SelectResult:
    """
    Result of a select-style call.

    Attributes:
        sql: The statement that was run
        rows: Decoded rows
    """

    sql: str
    rows: list[dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)


class SQLAdapter(ABC):
    """
    Abstract base class for SQL persistence adapters.

    Adapters are responsible for:
    1. Model registration (per-instance registry)
    2. DML: create, upsert, update, find, select, count, delete
    3. Schema sync: create, alter, check and recreate tables
    """

    name: str = "sql"

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self.registry = registry if registry is not None else SchemaRegistry()

    def define(self, model: ModelSchema | dict[str, Any]) -> ModelSchema:
        """Register a model with this adapter."""
        return self.registry.define(model)

    def model(self, name: str) -> ModelSchema:
        return self.registry.get(name)

    # =========================================================================
    # DATA ACCESS
    # =========================================================================

    @abstractmethod
    async def create(self, model: str, data: Mapping[str, Any]) -> Any:
        """Insert a row and return the generated id."""
        ...

    @abstractmethod
    async def update_or_create(self, model: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert or update by primary key; attaches a generated id to `data`."""
        ...

    @abstractmethod
    async def save(self, model: str, data: Mapping[str, Any]) -> None:
        """Update the row identified by data["id"]."""
        ...

    @abstractmethod
    async def update_attributes(self, model: str, id: Any, data: Mapping[str, Any]) -> None:
        """Update selected columns of one row."""
        ...

    @abstractmethod
    async def find(self, model: str, id: Any) -> dict[str, Any] | None:
        """Fetch one row by primary key."""
        ...

    @abstractmethod
    async def exists(self, model: str, id: Any) -> bool:
        ...

    @abstractmethod
    async def all(self, model: str, filter: Filter | None = None) -> SelectResult:
        """
        Select rows matching a filter.

        Driver and connection errors are raised, never returned next to an
        empty row list; a SelectResult always holds the rows that were read.
        """
        ...

    @abstractmethod
    async def count(self, model: str, where: Mapping[str, Any] | None = None) -> int:
        ...

    @abstractmethod
    async def destroy(self, model: str, id: Any) -> None:
        ...

    @abstractmethod
    async def destroy_all(self, model: str) -> None:
        ...

    # =========================================================================
    # SCHEMA SYNC
    # =========================================================================

    @abstractmethod
    async def autoupdate(self, models: list[str] | None = None) -> Any:
        """Create missing tables and alter existing ones to match their models."""
        ...

    @abstractmethod
    async def is_actual(self, models: list[str] | None = None) -> Any:
        """Report whether live tables match their models, without changing them."""
        ...

    @abstractmethod
    async def automigrate(self, models: list[str] | None = None) -> Any:
        """Drop and recreate tables from their models."""
        ...
