"""
ormysql - MySQL persistence adapter for a host ORM.

Turns declared model schemas and structured filters into MySQL statements,
decodes result rows back into Python values, and keeps live tables in sync
with their models through minimal ALTER TABLE diffs.
"""

__version__ = "0.1.0"

from ormysql.adapters.mysql import MySQLAdapter, QueryExecutor
from ormysql.core.dsl import Filter, IsNull, Op, OpKind, Scalar
from ormysql.core.errors import (
    EncodingError,
    ModelNotRegisteredError,
    OrmysqlError,
    ValidationError,
)
from ormysql.core.registry import SchemaRegistry
from ormysql.core.types import (
    CompositeIndex,
    IndexSpec,
    ModelSchema,
    PropertyDescriptor,
    PropertyType,
)

__all__ = [
    # Version
    "__version__",
    # Adapter
    "MySQLAdapter",
    "QueryExecutor",
    # DSL
    "Filter",
    "IsNull",
    "Op",
    "OpKind",
    "Scalar",
    # Errors
    "OrmysqlError",
    "ModelNotRegisteredError",
    "ValidationError",
    "EncodingError",
    # Schema
    "SchemaRegistry",
    "CompositeIndex",
    "IndexSpec",
    "ModelSchema",
    "PropertyDescriptor",
    "PropertyType",
]
