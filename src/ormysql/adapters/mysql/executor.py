"""
SQL executor.

Runs one statement per borrowed connection from a SQLAlchemy engine pool.
Supports both sync and async engines.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.ext.asyncio import AsyncEngine

from ormysql.logging import get_logger

logger = get_logger(__name__)

# Called with (sql, duration_ms) after every statement.
QueryLogHook = Callable[[str, float], None]

# Statements arrive fully rendered; the driver must not apply its own
# parameter interpolation to them.
_RAW_SQL = {"no_parameters": True}


@dataclass
class QueryOutcome:
    """
    Raw result of one statement.

    Attributes:
        rows: Result rows as dicts (empty for statements returning no rows)
        insert_id: Auto-increment id generated by the statement, if any
        rowcount: Rows matched or affected, as reported by the driver
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    insert_id: int | None = None
    rowcount: int = -1


def _outcome(result: CursorResult) -> QueryOutcome:
    if result.returns_rows:
        rows = [dict(row) for row in result.mappings()]
        return QueryOutcome(rows=rows, rowcount=result.rowcount)
    return QueryOutcome(insert_id=result.lastrowid or None, rowcount=result.rowcount)


class QueryExecutor:
    """
    Executes SQL text against a pooled engine.

    Each call borrows a connection, runs exactly one statement, commits and
    returns the connection to the pool. Pool and driver errors propagate
    unchanged.

    Usage with sync engine:
        engine = create_engine("mysql+pymysql://user:pw@localhost/app")
        executor = QueryExecutor(engine)
        outcome = await executor.query("SELECT 1")

    Usage with async engine:
        engine = create_async_engine("mysql+aiomysql://user:pw@localhost/app")
        executor = QueryExecutor(engine, log=lambda sql, ms: print(sql, ms))
    """

    def __init__(
        self,
        engine: Engine | AsyncEngine,
        log: QueryLogHook | None = None,
    ) -> None:
        """
        Initialize the executor.

        Args:
            engine: SQLAlchemy engine (sync or async); its pool supplies connections
            log: Optional hook receiving each statement and its duration
        """
        if log is not None and not callable(log):
            raise TypeError("log hook must be callable")
        self.engine = engine
        self.is_async = isinstance(engine, AsyncEngine)
        self.log = log

    async def query(self, sql: str) -> QueryOutcome:
        """Run a single statement on its own connection."""
        if not isinstance(sql, str) or not sql.strip():
            raise TypeError("sql must be a non-empty string")

        start = time.perf_counter()
        try:
            if self.is_async:
                return await self._query_async(sql)
            loop = asyncio.get_event_loop()
            return await loop.run_in_executor(None, self._query_sync, sql)
        finally:
            # Timed and reported whether or not the statement succeeded.
            duration_ms = (time.perf_counter() - start) * 1000
            logger.debug("Executed statement", sql=sql, duration_ms=round(duration_ms, 3))
            if self.log is not None:
                self.log(sql, duration_ms)

    def _query_sync(self, sql: str) -> QueryOutcome:
        with self.engine.connect() as conn:  # type: ignore[union-attr]
            result = conn.exec_driver_sql(sql, execution_options=_RAW_SQL)
            outcome = _outcome(result)
            conn.commit()
        return outcome

    async def _query_async(self, sql: str) -> QueryOutcome:
        async with self.engine.connect() as conn:  # type: ignore[union-attr]
            result = await conn.exec_driver_sql(sql, execution_options=_RAW_SQL)
            outcome = _outcome(result)
            await conn.commit()
        return outcome

    def dispose(self) -> None:
        """Close pooled connections (sync engines only)."""
        if not self.is_async:
            self.engine.dispose()  # type: ignore[union-attr]
