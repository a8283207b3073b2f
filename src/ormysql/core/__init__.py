"""
ormysql Core Module.

Contains the model schema types, the filter DSL, the schema registry and the
error taxonomy.
"""

from ormysql.core.dsl import (
    Condition,
    Filter,
    IsNull,
    Op,
    OpKind,
    Scalar,
    condition_from_value,
)
from ormysql.core.errors import (
    EncodingError,
    ModelNotRegisteredError,
    OrmysqlError,
    ValidationError,
)
from ormysql.core.registry import SchemaRegistry
from ormysql.core.types import (
    PRIMARY_KEY,
    CompositeIndex,
    IndexSpec,
    ModelSchema,
    PropertyDescriptor,
    PropertyType,
)

__all__ = [
    # DSL
    "Condition",
    "Filter",
    "IsNull",
    "Op",
    "OpKind",
    "Scalar",
    "condition_from_value",
    # Errors
    "OrmysqlError",
    "ModelNotRegisteredError",
    "ValidationError",
    "EncodingError",
    # Registry
    "SchemaRegistry",
    # Types
    "PRIMARY_KEY",
    "CompositeIndex",
    "IndexSpec",
    "ModelSchema",
    "PropertyDescriptor",
    "PropertyType",
]
