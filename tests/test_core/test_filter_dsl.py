"""
Tests for the filter DSL.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from ormysql.core.dsl import (
    Filter,
    IsNull,
    Op,
    OpKind,
    Scalar,
    condition_from_value,
)
from ormysql.core.errors import ValidationError


class TestConditionFromValue:
    def test_none_is_null(self):
        assert condition_from_value(None) == IsNull()

    def test_plain_value_is_scalar(self):
        assert condition_from_value("active") == Scalar(value="active")
        assert condition_from_value(5) == Scalar(value=5)

    def test_operator_dict(self):
        cond = condition_from_value({"gt": 5})
        assert cond == Op(op=OpKind.GT, operand=5)

    def test_tagged_condition_passes_through(self):
        cond = Op(op=OpKind.LIKE, operand="a%")
        assert condition_from_value(cond) is cond

    def test_unknown_operator(self):
        with pytest.raises(ValidationError) as exc:
            condition_from_value({"regexp": "^a"}, field="name")
        assert exc.value.field == "name"

    def test_multi_key_dict_rejected(self):
        with pytest.raises(ValidationError):
            condition_from_value({"gt": 1, "lt": 5})

    def test_between_needs_two_values(self):
        with pytest.raises(ValidationError):
            condition_from_value({"between": [1, 2, 3]})

    def test_inq_needs_sequence(self):
        with pytest.raises(ValidationError):
            condition_from_value({"inq": 5})

    def test_custom_needs_string(self):
        with pytest.raises(ValidationError):
            condition_from_value({"custom": 5})


class TestOp:
    def test_values(self):
        assert Op(op=OpKind.INQ, operand=(1, 2)).values == [1, 2]

    def test_invalid_between_direct(self):
        with pytest.raises(PydanticValidationError):
            Op(op=OpKind.BETWEEN, operand=1)


class TestFilter:
    def test_build_translates_shorthand(self):
        f = Filter.build(
            where={"age": {"gte": 18}, "deleted_at": None, "status": "open"},
            order="created_at DESC",
            limit=10,
            skip=20,
        )
        assert f.where["age"] == Op(op=OpKind.GTE, operand=18)
        assert f.where["deleted_at"] == IsNull()
        assert f.where["status"] == Scalar(value="open")
        assert f.order == ["created_at DESC"]
        assert f.limit == 10
        assert f.skip == 20

    def test_defaults(self):
        f = Filter()
        assert f.where == {}
        assert f.order == []
        assert f.limit is None
        assert f.skip == 0

    def test_negative_limit_rejected(self):
        with pytest.raises(PydanticValidationError):
            Filter(limit=-1)

    def test_accepts_tagged_conditions(self):
        f = Filter(where={"name": IsNull(), "age": Op(op=OpKind.LT, operand=3)})
        assert isinstance(f.where["name"], IsNull)
        assert isinstance(f.where["age"], Op)
