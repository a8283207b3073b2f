"""
Query filter DSL for ormysql.

Every where-condition is an explicit tagged variant: `Scalar`, `IsNull` or
`Op`. The SQL layer never guesses an operator from the shape of a value;
the host's plain-dict shorthand is translated here, once, by
`condition_from_value`.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ormysql.core.errors import ValidationError


class OpKind(str, Enum):
    """Supported filter operators."""

    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    INQ = "inq"
    NIN = "nin"
    NEQ = "neq"
    LIKE = "like"
    CUSTOM = "custom"


class Scalar(BaseModel):
    """Equality against a plain value."""

    kind: Literal["scalar"] = "scalar"
    value: Any

    model_config = {"frozen": True}


class IsNull(BaseModel):
    """The field must be NULL."""

    kind: Literal["is_null"] = "is_null"

    model_config = {"frozen": True}


class Op(BaseModel):
    """
    An operator condition.

    Examples:
        Op(op=OpKind.GT, operand=5)
        Op(op=OpKind.BETWEEN, operand=[1, 10])
        Op(op=OpKind.INQ, operand=["a", "b"])
        Op(op=OpKind.CUSTOM, operand="`score` > `threshold`")
    """

    kind: Literal["op"] = "op"
    op: OpKind
    operand: Any

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_operand(self) -> "Op":
        match self.op:
            case OpKind.BETWEEN:
                if not isinstance(self.operand, (list, tuple)) or len(self.operand) != 2:
                    raise ValueError("between requires exactly two values")
            case OpKind.INQ | OpKind.NIN:
                if not isinstance(self.operand, (list, tuple, set, frozenset)):
                    raise ValueError(f"{self.op.value} requires a list of values")
            case OpKind.CUSTOM:
                if not isinstance(self.operand, str):
                    raise ValueError("custom requires a raw SQL string")
            case _:
                pass
        return self

    @property
    def values(self) -> list[Any]:
        """Operand as a list (for between/inq/nin)."""
        return list(self.operand)


Condition = Annotated[Union[Scalar, IsNull, Op], Field(discriminator="kind")]

_OPERATORS = {op.value: op for op in OpKind}


def condition_from_value(value: Any, field: str | None = None) -> Scalar | IsNull | Op:
    """
    Translate the host's shorthand into a tagged condition.

        None                 -> IsNull()
        {"gt": 5}            -> Op(GT, 5)
        "active" / 5 / ...   -> Scalar(value)

    Conditions that are already tagged pass through unchanged.
    """
    if isinstance(value, (Scalar, IsNull, Op)):
        return value
    if value is None:
        return IsNull()
    if isinstance(value, Mapping):
        if len(value) != 1:
            raise ValidationError(
                f"Operator condition must have exactly one key, got {sorted(value)}",
                field=field,
            )
        (name, operand), = value.items()
        op = _OPERATORS.get(name)
        if op is None:
            raise ValidationError(f"Unknown filter operator: {name!r}", field=field)
        try:
            return Op(op=op, operand=operand)
        except ValueError as e:
            raise ValidationError(f"Invalid operand for {name}: {e}", field=field) from e
    return Scalar(value=value)


class Filter(BaseModel):
    """
    A structured where/order/limit request.

    Example:
        Filter.build(
            where={"age": {"gt": 18}, "deleted_at": None},
            order=["created_at DESC", "name"],
            limit=25,
            skip=50,
        )
    """

    where: dict[str, Condition] = Field(default_factory=dict)
    order: list[str] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=0)
    skip: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @field_validator("order", mode="before")
    @classmethod
    def coerce_order(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @classmethod
    def build(
        cls,
        where: Mapping[str, Any] | None = None,
        order: str | list[str] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> "Filter":
        """Build a filter from host-style shorthand values."""
        conditions = {
            name: condition_from_value(value, field=name)
            for name, value in (where or {}).items()
        }
        return cls(where=conditions, order=order, limit=limit, skip=skip or 0)
