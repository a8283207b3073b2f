"""
MySQL statement builder.

Assembles complete DML and DDL statements for a registered model. The
column and index definition helpers are shared with the schema differ.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ormysql.adapters.mysql.codec import encode, encode_literal, escape_name
from ormysql.adapters.mysql.compiler import FilterCompiler
from ormysql.core.dsl import Condition, Filter
from ormysql.core.types import (
    PRIMARY_KEY,
    CompositeIndex,
    IndexSpec,
    ModelSchema,
    PropertyDescriptor,
    PropertyType,
)

PRIMARY_KEY_DEFINITION = f"{escape_name(PRIMARY_KEY)} INT(11) NOT NULL AUTO_INCREMENT PRIMARY KEY"


def datatype(prop: PropertyDescriptor) -> str:
    """Native column type for a property, upper-cased as MySQL reports it."""
    match prop.type:
        case PropertyType.STRING | PropertyType.JSON:
            return f"VARCHAR({prop.limit or 255})"
        case PropertyType.TEXT:
            return "TEXT"
        case PropertyType.NUMBER:
            return f"INT({prop.limit or 11})"
        case PropertyType.DATE:
            return "DATETIME"
        case PropertyType.BOOLEAN:
            return "TINYINT(1)"
        case PropertyType.POINT:
            return "POINT"


def column_definition(prop: PropertyDescriptor) -> str:
    """Type and nullability, e.g. `VARCHAR(255) NOT NULL`."""
    return f"{datatype(prop)} {'NULL' if prop.nullable else 'NOT NULL'}"


def _index_clause(name: str, columns: list[str], spec: IndexSpec) -> str:
    kind = f"{spec.kind} " if spec.kind else ""
    using = f" USING {spec.type}" if spec.type else ""
    cols = ", ".join(escape_name(c) for c in columns)
    return f"{kind}INDEX {escape_name(name)} ({cols}){using}"


def single_index_definition(name: str, spec: IndexSpec) -> str:
    """Index clause for an index on one property, named after it."""
    return _index_clause(name, [name], spec)


def composite_index_definition(name: str, index: CompositeIndex) -> str:
    """Index clause for a named multi-column index."""
    return _index_clause(name, index.columns, index.spec)


class StatementBuilder:
    """
    Builds SQL statements for registered models.

    Usage:
        builder = StatementBuilder()
        builder.build_insert(model, {"name": "Ada", "age": 36})
        # "INSERT INTO `User` SET `name` = 'Ada', `age` = 36"
    """

    def __init__(self, compiler: FilterCompiler | None = None) -> None:
        self.compiler = compiler or FilterCompiler()

    @staticmethod
    def table(model: ModelSchema) -> str:
        return escape_name(model.table_name)

    def to_fields(self, model: ModelSchema, data: Mapping[str, Any]) -> list[str]:
        """`column = literal` assignments for every known, non-omitted field."""
        fields = []
        for key, value in data.items():
            prop = model.get_property(key)
            if prop is None or key == PRIMARY_KEY:
                continue
            literal = encode(prop, value)
            if literal is None:
                continue
            fields.append(f"{escape_name(key)} = {literal}")
        return fields

    # === DML ===

    def build_insert(self, model: ModelSchema, data: Mapping[str, Any]) -> str:
        fields = self.to_fields(model, data)
        if not fields:
            return f"INSERT INTO {self.table(model)} VALUES ()"
        return f"INSERT INTO {self.table(model)} SET {', '.join(fields)}"

    def build_upsert(self, model: ModelSchema, data: Mapping[str, Any]) -> str:
        """INSERT ... ON DUPLICATE KEY UPDATE keyed on the primary key."""
        names: list[str] = []
        values: list[str] = []
        updates: list[str] = []
        for key, value in data.items():
            if key == PRIMARY_KEY:
                literal = encode(None, value)
            else:
                prop = model.get_property(key)
                if prop is None:
                    continue
                literal = encode(prop, value)
            if literal is None:
                continue
            column = escape_name(key)
            names.append(column)
            values.append(literal)
            if key != PRIMARY_KEY:
                updates.append(f"{column} = {literal}")

        if not updates:
            pk = escape_name(PRIMARY_KEY)
            updates.append(f"{pk} = {pk}")

        return (
            f"INSERT INTO {self.table(model)} ({', '.join(names)}) "
            f"VALUES ({', '.join(values)}) "
            f"ON DUPLICATE KEY UPDATE {', '.join(updates)}"
        )

    def build_update(self, model: ModelSchema, id: Any, data: Mapping[str, Any]) -> str | None:
        """UPDATE by primary key; None when there is nothing to set."""
        fields = self.to_fields(model, data)
        if not fields:
            return None
        return (
            f"UPDATE {self.table(model)} SET {', '.join(fields)} "
            f"WHERE {self._pk_clause(id)}"
        )

    def build_select(self, model: ModelSchema, filter: Filter | None = None) -> str:
        sql = f"SELECT * FROM {self.table(model)}"
        if filter is not None:
            tail = self.compiler.compile_filter(model.properties, filter)
            if tail:
                sql += f" {tail}"
        return sql

    def build_find(self, model: ModelSchema, id: Any) -> str:
        return f"SELECT * FROM {self.table(model)} WHERE {self._pk_clause(id)} LIMIT 1"

    def build_exists(self, model: ModelSchema, id: Any) -> str:
        return (
            f"SELECT 1 AS {escape_name('found')} FROM {self.table(model)} "
            f"WHERE {self._pk_clause(id)} LIMIT 1"
        )

    def build_count(
        self,
        model: ModelSchema,
        where: Mapping[str, Condition] | None = None,
    ) -> str:
        sql = f"SELECT COUNT(*) AS {escape_name('cnt')} FROM {self.table(model)}"
        clause = self.compiler.compile_where(model.properties, where or {})
        if clause:
            sql += f" WHERE {clause}"
        return sql

    def build_delete(self, model: ModelSchema, id: Any) -> str:
        return f"DELETE FROM {self.table(model)} WHERE {self._pk_clause(id)} LIMIT 1"

    def build_delete_all(self, model: ModelSchema) -> str:
        return f"DELETE FROM {self.table(model)}"

    def _pk_clause(self, id: Any) -> str:
        return f"{escape_name(PRIMARY_KEY)} = {encode_literal(id)}"

    # === DDL ===

    def properties_sql(self, model: ModelSchema) -> str:
        """Column and index clauses for CREATE TABLE."""
        clauses = [PRIMARY_KEY_DEFINITION]
        props = model.active_properties
        for name, prop in props.items():
            clauses.append(f"{escape_name(name)} {column_definition(prop)}")
        for name, prop in props.items():
            if prop.index is not None:
                clauses.append(single_index_definition(name, prop.index))
        for name, index in model.active_indexes.items():
            clauses.append(composite_index_definition(name, index))
        return ",\n  ".join(clauses)

    def build_create_table(self, model: ModelSchema) -> str:
        return f"CREATE TABLE {self.table(model)} (\n  {self.properties_sql(model)}\n)"

    def build_drop_table(self, model: ModelSchema) -> str:
        return f"DROP TABLE IF EXISTS {self.table(model)}"

    def build_show_fields(self, model: ModelSchema) -> str:
        return f"SHOW FIELDS FROM {self.table(model)}"

    def build_show_indexes(self, model: ModelSchema) -> str:
        return f"SHOW INDEXES FROM {self.table(model)}"
