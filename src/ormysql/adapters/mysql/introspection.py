"""
MySQL live schema introspection.

Parses the rows returned by `SHOW FIELDS FROM` and `SHOW INDEXES FROM`
into descriptors the schema differ can compare against a declared model.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

PRIMARY_INDEX = "PRIMARY"


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode()
    return str(value)


@dataclass(frozen=True)
class LiveColumn:
    """A column as reported by SHOW FIELDS."""

    name: str
    type: str
    nullable: bool

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> LiveColumn:
        return cls(
            name=_text(row["Field"]),
            type=_text(row["Type"]),
            nullable=_text(row["Null"]).upper() == "YES",
        )


@dataclass
class LiveIndex:
    """An index as reported by SHOW INDEXES, columns in sequence order."""

    name: str
    columns: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LiveSchema:
    """Introspected columns and indexes of one table."""

    columns: list[LiveColumn]
    indexes: dict[str, LiveIndex]

    def column(self, name: str) -> LiveColumn | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None


def parse_columns(rows: Iterable[Mapping[str, Any]]) -> list[LiveColumn]:
    return [LiveColumn.from_row(row) for row in rows]


def group_indexes(rows: Iterable[Mapping[str, Any]]) -> dict[str, LiveIndex]:
    """
    Group SHOW INDEXES rows by index name.

    Each row carries one (Key_name, Seq_in_index, Column_name) triple;
    columns are ordered by their 1-based sequence position.
    """
    positions: dict[str, dict[int, str]] = {}
    for row in rows:
        name = _text(row["Key_name"])
        seq = int(row["Seq_in_index"])
        positions.setdefault(name, {})[seq] = _text(row["Column_name"])

    return {
        name: LiveIndex(name=name, columns=[cols[i] for i in sorted(cols)])
        for name, cols in positions.items()
    }


def build_live_schema(
    field_rows: Iterable[Mapping[str, Any]],
    index_rows: Iterable[Mapping[str, Any]],
) -> LiveSchema:
    return LiveSchema(columns=parse_columns(field_rows), indexes=group_indexes(index_rows))
