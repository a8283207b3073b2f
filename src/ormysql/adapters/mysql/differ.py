"""
MySQL schema differ.

Compares a declared ModelSchema against the live table and produces the
ALTER TABLE fragments that reconcile them. Diffing is pure; executing the
result is the adapter's job.

Applying the fragments once and diffing again yields no fragments.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ormysql.adapters.mysql.codec import escape_name
from ormysql.adapters.mysql.introspection import PRIMARY_INDEX, LiveColumn, LiveIndex
from ormysql.adapters.mysql.statements import (
    column_definition,
    composite_index_definition,
    datatype,
    single_index_definition,
)
from ormysql.core.types import PRIMARY_KEY, ModelSchema, PropertyDescriptor


@dataclass
class SchemaDiff:
    """
    Outcome of diffing one model.

    Attributes:
        model: Model name
        statements: ALTER fragments in execution order
        query: The full ALTER TABLE statement, or None when in sync
    """

    model: str
    statements: list[str] = field(default_factory=list)
    query: str | None = None

    @property
    def in_sync(self) -> bool:
        return not self.statements

    def to_dict(self) -> dict[str, object]:
        return {
            "model": self.model,
            "in_sync": self.in_sync,
            "statements": list(self.statements),
            "query": self.query,
        }


_INT_DISPLAY_WIDTH = re.compile(r"^(TINYINT|SMALLINT|MEDIUMINT|INT|INTEGER|BIGINT)\(\d+\)")


def normalize_type(type: str) -> str:
    """
    Canonical form of a column type for comparison.

    MySQL 8.0.19+ no longer reports integer display widths (`int(11)` shows
    up as `int`), so widths are ignored. `TINYINT(1)` is kept since it is
    how booleans are declared and still reported.
    """
    text = type.strip().upper()
    if text.startswith("TINYINT(1)"):
        return text
    return _INT_DISPLAY_WIDTH.sub(r"\1", text)


def column_changed(prop: PropertyDescriptor, live: LiveColumn) -> bool:
    """True when nullability or the native type differ."""
    if live.nullable != prop.nullable:
        return True
    return normalize_type(live.type) != normalize_type(datatype(prop))


class SchemaDiffer:
    """
    Computes ALTER TABLE fragments for a model.

    Usage:
        differ = SchemaDiffer()
        diff = differ.diff(model, live_columns, live_indexes)
        if not diff.in_sync:
            await executor.query(diff.query)
    """

    def diff(
        self,
        model: ModelSchema,
        live_columns: list[LiveColumn],
        live_indexes: Mapping[str, LiveIndex],
    ) -> SchemaDiff:
        statements = self.diff_statements(model, live_columns, live_indexes)
        return SchemaDiff(
            model=model.name,
            statements=statements,
            query=self.alter_table_sql(model, statements),
        )

    def diff_statements(
        self,
        model: ModelSchema,
        live_columns: list[LiveColumn],
        live_indexes: Mapping[str, LiveIndex],
    ) -> list[str]:
        statements: list[str] = []
        statements.extend(self._column_changes(model, live_columns))

        # Indexes dropped below must be re-added, so work on a copy.
        remaining = dict(live_indexes)
        statements.extend(self._index_removals(model, remaining))
        statements.extend(self._index_additions(model, remaining))
        return statements

    def alter_table_sql(self, model: ModelSchema, statements: list[str]) -> str | None:
        if not statements:
            return None
        return f"ALTER TABLE {escape_name(model.table_name)} " + ",\n".join(statements)

    def _column_changes(
        self,
        model: ModelSchema,
        live_columns: list[LiveColumn],
    ) -> list[str]:
        statements = []
        props = model.active_properties
        live_by_name = {col.name: col for col in live_columns}

        for name, prop in props.items():
            column = escape_name(name)
            live = live_by_name.get(name)
            if live is None:
                statements.append(f"ADD COLUMN {column} {column_definition(prop)}")
            elif column_changed(prop, live):
                statements.append(
                    f"CHANGE COLUMN {column} {column} {column_definition(prop)}"
                )

        for col in live_columns:
            if col.name == PRIMARY_KEY:
                continue
            if col.name not in props:
                statements.append(f"DROP COLUMN {escape_name(col.name)}")

        return statements

    def _index_removals(
        self,
        model: ModelSchema,
        live_indexes: dict[str, LiveIndex],
    ) -> list[str]:
        statements = []
        props = model.properties
        composites = model.active_indexes

        for name in list(live_indexes):
            if name in (PRIMARY_INDEX, PRIMARY_KEY):
                continue

            prop = props.get(name)
            is_single = prop is not None and prop.index is not None
            if name not in composites and not is_single:
                statements.append(f"DROP INDEX {escape_name(name)}")
                del live_indexes[name]
                continue

            if name in composites and live_indexes[name].columns != composites[name].columns:
                # Column order cannot be changed in place; drop and re-add.
                statements.append(f"DROP INDEX {escape_name(name)}")
                del live_indexes[name]

        return statements

    def _index_additions(
        self,
        model: ModelSchema,
        live_indexes: Mapping[str, LiveIndex],
    ) -> list[str]:
        statements = []
        for name, prop in model.active_properties.items():
            if prop.index is not None and name not in live_indexes:
                statements.append(f"ADD {single_index_definition(name, prop.index)}")

        for name, index in model.active_indexes.items():
            if name not in live_indexes:
                statements.append(f"ADD {composite_index_definition(name, index)}")

        return statements
