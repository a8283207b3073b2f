"""
ormysql Adapters Module.

Contains the abstract adapter interface and the MySQL implementation.
"""

from ormysql.adapters.base import SelectResult, SQLAdapter

__all__ = [
    "SQLAdapter",
    "SelectResult",
]
