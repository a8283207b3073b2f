"""
MySQL filter compiler.

Compiles ormysql filter conditions into WHERE / ORDER BY / LIMIT fragments.
"""

from __future__ import annotations

from collections.abc import Mapping

from ormysql.adapters.mysql.codec import encode, escape_name
from ormysql.core.dsl import Condition, Filter, IsNull, Op, OpKind, Scalar
from ormysql.core.errors import ValidationError
from ormysql.core.types import PropertyDescriptor

# Constant clauses standing in for an empty IN list.
ALWAYS_FALSE = "0"
ALWAYS_TRUE = "1"

_COMPARISON = {
    OpKind.GT: ">",
    OpKind.GTE: ">=",
    OpKind.LT: "<",
    OpKind.LTE: "<=",
    OpKind.NEQ: "!=",
    OpKind.LIKE: "LIKE",
}

_DIRECTIONS = {"ASC", "DESC"}


class FilterCompiler:
    """
    Compiles a Filter against the properties of one model.

    Usage:
        compiler = FilterCompiler()
        compiler.compile_where(model.properties, {"age": Op(op=OpKind.GT, operand=5)})
        # "`age` > 5"
    """

    def compile_where(
        self,
        properties: Mapping[str, PropertyDescriptor | None],
        conditions: Mapping[str, Condition],
    ) -> str:
        """
        Build the body of a WHERE clause (without the keyword).

        Returns an empty string when there are no conditions.
        """
        clauses = [
            self._compile_condition(name, properties.get(name), condition)
            for name, condition in conditions.items()
        ]
        return " AND ".join(clauses)

    def _compile_condition(
        self,
        name: str,
        prop: PropertyDescriptor | None,
        condition: Condition,
    ) -> str:
        column = escape_name(name)

        match condition:
            case IsNull():
                return f"{column} IS NULL"
            case Scalar(value=None):
                return f"{column} IS NULL"
            case Scalar(value=value):
                return f"{column} = {encode(prop, value)}"
            case Op(op=OpKind.CUSTOM, operand=raw):
                # Passed through verbatim; the caller owns its safety.
                return raw
            case Op(op=OpKind.BETWEEN) as cond:
                low, high = cond.values
                return f"{column} BETWEEN {encode(prop, low)} AND {encode(prop, high)}"
            case Op(op=OpKind.INQ | OpKind.NIN) as cond:
                values = cond.values
                if not values:
                    return ALWAYS_FALSE if cond.op == OpKind.INQ else ALWAYS_TRUE
                keyword = "IN" if cond.op == OpKind.INQ else "NOT IN"
                rendered = ", ".join(encode(prop, v) for v in values)
                return f"{column} {keyword} ({rendered})"
            case Op(op=op, operand=operand):
                return f"{column} {_COMPARISON[op]} {encode(prop, operand)}"

        raise ValidationError(f"Unsupported condition: {condition!r}", field=name)

    def compile_order(self, order: str | list[str]) -> str:
        """
        Build an ORDER BY clause from "field" / "field DIRECTION" tokens.

        Returns an empty string for an empty order list.
        """
        if isinstance(order, str):
            order = [order]
        parts = []
        for token in order:
            pieces = token.split()
            if not pieces or len(pieces) > 2:
                raise ValidationError(f"Invalid order token: {token!r}")
            column = escape_name(pieces[0])
            if len(pieces) == 1:
                parts.append(column)
                continue
            direction = pieces[1].upper()
            if direction not in _DIRECTIONS:
                raise ValidationError(
                    f"Invalid order direction: {pieces[1]!r}", field=pieces[0]
                )
            parts.append(f"{column} {direction}")
        if not parts:
            return ""
        return "ORDER BY " + ", ".join(parts)

    def compile_limit(self, limit: int, skip: int | None = 0) -> str:
        """Build a LIMIT clause, with the offset first when skip is set."""
        if skip:
            return f"LIMIT {int(skip)}, {int(limit)}"
        return f"LIMIT {int(limit)}"

    def compile_filter(
        self,
        properties: Mapping[str, PropertyDescriptor | None],
        filter: Filter,
    ) -> str:
        """Compile where, order and limit into one trailing SQL fragment."""
        parts = []
        where = self.compile_where(properties, filter.where)
        if where:
            parts.append(f"WHERE {where}")
        if filter.order:
            parts.append(self.compile_order(filter.order))
        if filter.limit:
            parts.append(self.compile_limit(filter.limit, filter.skip))
        return " ".join(parts)
