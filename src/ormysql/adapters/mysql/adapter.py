"""
MySQL adapter implementation.

The main adapter class that implements the SQLAdapter interface for MySQL.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError

from ormysql.adapters.base import SelectResult, SQLAdapter
from ormysql.adapters.mysql.codec import decode_row
from ormysql.adapters.mysql.differ import SchemaDiff, SchemaDiffer
from ormysql.adapters.mysql.executor import QueryOutcome
from ormysql.adapters.mysql.introspection import LiveSchema, build_live_schema
from ormysql.adapters.mysql.statements import StatementBuilder
from ormysql.core.dsl import Filter, condition_from_value
from ormysql.core.errors import ValidationError
from ormysql.core.registry import SchemaRegistry
from ormysql.core.types import PRIMARY_KEY, ModelSchema
from ormysql.logging import get_logger, with_log_context

logger = get_logger(__name__)


class Executor(Protocol):
    """Anything that can run one SQL statement and return its outcome."""

    async def query(self, sql: str) -> QueryOutcome: ...


class SyncAction(str, Enum):
    """What schema sync did to a table."""

    CREATED = "created"
    ALTERED = "altered"
    UNCHANGED = "unchanged"
    RECREATED = "recreated"
    FAILED = "failed"


@dataclass
class SyncReport:
    """Per-model outcome of autoupdate / automigrate."""

    model: str
    action: SyncAction
    statements: list[str] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SchemaCheck:
    """
    Aggregate result of a check-only schema comparison.

    Attributes:
        in_sync: True only when every model matched and none failed
        diffs: Would-be changes per model
        errors: Models whose check failed, with the error
    """

    in_sync: bool
    diffs: dict[str, SchemaDiff] = field(default_factory=dict)
    errors: dict[str, BaseException] = field(default_factory=dict)

    @property
    def statements(self) -> dict[str, list[str]]:
        return {name: diff.statements for name, diff in self.diffs.items() if not diff.in_sync}


class MySQLAdapter(SQLAdapter):
    """
    MySQL adapter.

    Usage:
        adapter = MySQLAdapter(QueryExecutor(engine))
        adapter.define({"name": "User", "properties": {"email": {"type": "string"}}})
        await adapter.autoupdate()
        user_id = await adapter.create("User", {"email": "ada@example.com"})
        result = await adapter.all("User", Filter.build(where={"id": user_id}))
    """

    name = "mysql"

    def __init__(
        self,
        executor: Executor,
        registry: SchemaRegistry | None = None,
        builder: StatementBuilder | None = None,
        differ: SchemaDiffer | None = None,
    ) -> None:
        """
        Initialize the MySQL adapter.

        Args:
            executor: Runs SQL text (normally a QueryExecutor over a pooled engine)
            registry: Model registry; a fresh one is created when omitted
            builder: Statement builder
            differ: Schema differ
        """
        super().__init__(registry)
        self.executor = executor
        self.builder = builder or StatementBuilder()
        self.differ = differ or SchemaDiffer()

    # =========================================================================
    # DATA ACCESS
    # =========================================================================

    async def create(self, model: str, data: Mapping[str, Any]) -> Any:
        schema = self.model(model)
        outcome = await self.executor.query(self.builder.build_insert(schema, data))
        return outcome.insert_id

    async def update_or_create(self, model: str, data: dict[str, Any]) -> dict[str, Any]:
        schema = self.model(model)
        outcome = await self.executor.query(self.builder.build_upsert(schema, data))
        if outcome.insert_id:
            data[PRIMARY_KEY] = outcome.insert_id
        return data

    async def save(self, model: str, data: Mapping[str, Any]) -> None:
        if data.get(PRIMARY_KEY) is None:
            raise ValidationError("save() requires a primary key", field=PRIMARY_KEY)
        await self.update_attributes(model, data[PRIMARY_KEY], data)

    async def update_attributes(self, model: str, id: Any, data: Mapping[str, Any]) -> None:
        sql = self.builder.build_update(self.model(model), id, data)
        if sql is not None:
            await self.executor.query(sql)

    async def find(self, model: str, id: Any) -> dict[str, Any] | None:
        schema = self.model(model)
        outcome = await self.executor.query(self.builder.build_find(schema, id))
        if not outcome.rows:
            return None
        return decode_row(schema, outcome.rows[0])

    async def exists(self, model: str, id: Any) -> bool:
        outcome = await self.executor.query(self.builder.build_exists(self.model(model), id))
        return bool(outcome.rows)

    async def all(
        self,
        model: str,
        filter: Filter | Mapping[str, Any] | None = None,
    ) -> SelectResult:
        schema = self.model(model)
        sql = self.builder.build_select(schema, self._as_filter(filter))
        outcome = await self.executor.query(sql)
        return SelectResult(sql=sql, rows=[decode_row(schema, row) for row in outcome.rows])

    async def count(self, model: str, where: Mapping[str, Any] | None = None) -> int:
        conditions = {
            name: condition_from_value(value, field=name)
            for name, value in (where or {}).items()
        }
        outcome = await self.executor.query(self.builder.build_count(self.model(model), conditions))
        if not outcome.rows:
            return 0
        return int(outcome.rows[0]["cnt"])

    async def destroy(self, model: str, id: Any) -> None:
        await self.executor.query(self.builder.build_delete(self.model(model), id))

    async def destroy_all(self, model: str) -> None:
        await self.executor.query(self.builder.build_delete_all(self.model(model)))

    @staticmethod
    def _as_filter(filter: Filter | Mapping[str, Any] | None) -> Filter | None:
        if filter is None or isinstance(filter, Filter):
            return filter
        return Filter.build(
            where=filter.get("where"),
            order=filter.get("order"),
            limit=filter.get("limit"),
            skip=filter.get("skip"),
        )

    # =========================================================================
    # SCHEMA SYNC
    # =========================================================================

    async def introspect(self, model: ModelSchema) -> LiveSchema:
        """Read the live columns and indexes of a model's table."""
        fields = await self.executor.query(self.builder.build_show_fields(model))
        indexes = await self.executor.query(self.builder.build_show_indexes(model))
        return build_live_schema(fields.rows, indexes.rows)

    async def _introspect_or_none(self, model: ModelSchema) -> LiveSchema | None:
        """Introspect, treating a failed or empty result as a missing table."""
        try:
            live = await self.introspect(model)
        except SQLAlchemyError as e:
            logger.debug("Table not introspectable", error=str(e))
            return None
        return live if live.columns else None

    async def diff(self, model: str) -> SchemaDiff:
        """Compute the ALTER fragments for one model without running them."""
        schema = self.model(model)
        live = await self.introspect(schema)
        return self.differ.diff(schema, live.columns, live.indexes)

    async def autoupdate(self, models: list[str] | None = None) -> list[SyncReport]:
        """
        Bring every table in line with its model.

        Models are processed concurrently. A failure is logged and reported
        for its model only; the others still complete.
        """
        return await self._for_each_model(models, "autoupdate", self._autoupdate_model)

    async def _autoupdate_model(self, model: ModelSchema) -> SyncReport:
        live = await self._introspect_or_none(model)
        if live is None:
            sql = self.builder.build_create_table(model)
            await self.executor.query(sql)
            logger.info("Created table", table=model.table_name)
            return SyncReport(model=model.name, action=SyncAction.CREATED, statements=[sql])

        diff = self.differ.diff(model, live.columns, live.indexes)
        if diff.in_sync:
            return SyncReport(model=model.name, action=SyncAction.UNCHANGED)

        await self.executor.query(diff.query)  # type: ignore[arg-type]
        logger.info("Altered table", table=model.table_name, statements=len(diff.statements))
        return SyncReport(model=model.name, action=SyncAction.ALTERED, statements=diff.statements)

    async def automigrate(self, models: list[str] | None = None) -> list[SyncReport]:
        """Drop and recreate tables; existing data is lost."""
        return await self._for_each_model(models, "automigrate", self._automigrate_model)

    async def _automigrate_model(self, model: ModelSchema) -> SyncReport:
        statements = [
            self.builder.build_drop_table(model),
            self.builder.build_create_table(model),
        ]
        for sql in statements:
            await self.executor.query(sql)
        logger.info("Recreated table", table=model.table_name)
        return SyncReport(model=model.name, action=SyncAction.RECREATED, statements=statements)

    async def is_actual(self, models: list[str] | None = None) -> SchemaCheck:
        """
        Check-only schema sync.

        Computes every model's diff concurrently without executing anything.
        A missing table counts as out of sync, with its CREATE TABLE as the
        would-be statement. A failed check also counts as out of sync.
        """
        targets = self._targets(models)

        async def check(model: ModelSchema) -> SchemaDiff | BaseException:
            with with_log_context(model=model.name, operation="is_actual"):
                try:
                    live = await self._introspect_or_none(model)
                    if live is None:
                        sql = self.builder.build_create_table(model)
                        return SchemaDiff(model=model.name, statements=[sql], query=sql)
                    return self.differ.diff(model, live.columns, live.indexes)
                except Exception as e:
                    logger.error("Schema check failed", exc_info=e)
                    return e

        results = await asyncio.gather(*(check(m) for m in targets))

        result = SchemaCheck(in_sync=True)
        for model, outcome in zip(targets, results):
            if isinstance(outcome, SchemaDiff):
                result.diffs[model.name] = outcome
                if not outcome.in_sync:
                    result.in_sync = False
            else:
                result.errors[model.name] = outcome
                result.in_sync = False
        return result

    def _targets(self, models: list[str] | None) -> list[ModelSchema]:
        if models is None:
            return list(self.registry)
        return [self.model(name) for name in models]

    async def _for_each_model(
        self,
        models: list[str] | None,
        operation: str,
        fn: Callable[[ModelSchema], Awaitable[SyncReport]],
    ) -> list[SyncReport]:
        targets = self._targets(models)

        async def run(model: ModelSchema) -> SyncReport:
            with with_log_context(model=model.name, operation=operation):
                try:
                    return await fn(model)
                except Exception as e:
                    logger.error("Schema sync failed", exc_info=e)
                    return SyncReport(model=model.name, action=SyncAction.FAILED, error=e)

        reports = await asyncio.gather(*(run(m) for m in targets))
        return list(reports)
