"""
MySQL adapter for ormysql.

Value codec, filter compiler, statement builder, schema differ and the
pooled executor that runs their output.
"""

from __future__ import annotations

from ormysql.adapters.mysql.adapter import (
    MySQLAdapter,
    SchemaCheck,
    SyncAction,
    SyncReport,
)
from ormysql.adapters.mysql.codec import MISSING, decode, decode_row, encode, escape_name
from ormysql.adapters.mysql.compiler import FilterCompiler
from ormysql.adapters.mysql.differ import SchemaDiff, SchemaDiffer
from ormysql.adapters.mysql.executor import QueryExecutor, QueryOutcome
from ormysql.adapters.mysql.introspection import LiveColumn, LiveIndex, LiveSchema
from ormysql.adapters.mysql.statements import StatementBuilder

__all__ = [
    "MySQLAdapter",
    "SchemaCheck",
    "SyncAction",
    "SyncReport",
    "MISSING",
    "decode",
    "decode_row",
    "encode",
    "escape_name",
    "FilterCompiler",
    "SchemaDiff",
    "SchemaDiffer",
    "QueryExecutor",
    "QueryOutcome",
    "LiveColumn",
    "LiveIndex",
    "LiveSchema",
    "StatementBuilder",
]
