"""Tests for the MySQL filter compiler."""

from __future__ import annotations

import pytest

from ormysql.adapters.mysql.compiler import FilterCompiler
from ormysql.core.dsl import Filter, IsNull, Op, OpKind, Scalar, condition_from_value
from ormysql.core.errors import ValidationError


@pytest.fixture
def compiler():
    return FilterCompiler()


def where(compiler, model, conditions):
    tagged = {k: condition_from_value(v) for k, v in conditions.items()}
    return compiler.compile_where(model.properties, tagged)


class TestCompileWhere:
    def test_greater_than(self, compiler, user_model):
        assert where(compiler, user_model, {"age": {"gt": 5}}) == "`age` > 5"

    def test_is_null(self, compiler, user_model):
        assert where(compiler, user_model, {"name": None}) == "`name` IS NULL"
        assert compiler.compile_where(user_model.properties, {"name": IsNull()}) == "`name` IS NULL"

    def test_scalar_equality_uses_property_type(self, compiler, user_model):
        assert where(compiler, user_model, {"active": True}) == "`active` = 1"
        assert where(compiler, user_model, {"name": "Ada"}) == "`name` = 'Ada'"

    @pytest.mark.parametrize(
        ("op", "sql"),
        [
            ("gte", "`age` >= 3"),
            ("lt", "`age` < 3"),
            ("lte", "`age` <= 3"),
            ("neq", "`age` != 3"),
        ],
    )
    def test_comparisons(self, compiler, user_model, op, sql):
        assert where(compiler, user_model, {"age": {op: 3}}) == sql

    def test_like(self, compiler, user_model):
        assert where(compiler, user_model, {"name": {"like": "A%"}}) == "`name` LIKE 'A%'"

    def test_between(self, compiler, user_model):
        assert where(compiler, user_model, {"age": {"between": [18, 65]}}) == "`age` BETWEEN 18 AND 65"

    def test_between_dates_encoded_each_side(self, compiler, user_model):
        sql = where(compiler, user_model, {"joined_at": {"between": ["2024-01-01", "2024-02-01"]}})
        assert sql == "`joined_at` BETWEEN '2024-01-01 00:00:00' AND '2024-02-01 00:00:00'"

    def test_inq(self, compiler, user_model):
        sql = where(compiler, user_model, {"name": {"inq": ["a", "b'c"]}})
        assert sql == "`name` IN ('a', 'b\\'c')"

    def test_nin(self, compiler, user_model):
        assert where(compiler, user_model, {"age": {"nin": [1, 2, 3]}}) == "`age` NOT IN (1, 2, 3)"

    def test_empty_inq_is_always_false(self, compiler, user_model):
        assert where(compiler, user_model, {"age": {"inq": []}}) == "0"

    def test_empty_nin_is_always_true(self, compiler, user_model):
        assert where(compiler, user_model, {"age": {"nin": []}}) == "1"

    def test_custom_is_verbatim_without_field(self, compiler, user_model):
        sql = where(compiler, user_model, {"age": {"custom": "`age` % 2 = 0"}})
        assert sql == "`age` % 2 = 0"

    def test_clauses_joined_with_and(self, compiler, user_model):
        sql = where(compiler, user_model, {"age": {"gt": 1}, "name": "x", "bio": None})
        assert sql == "`age` > 1 AND `name` = 'x' AND `bio` IS NULL"

    def test_no_conditions(self, compiler, user_model):
        assert compiler.compile_where(user_model.properties, {}) == ""

    def test_unknown_field_is_escaped_generically(self, compiler, user_model):
        sql = compiler.compile_where(user_model.properties, {"t.owner": Scalar(value="x")})
        assert sql == "`t`.`owner` = 'x'"

    def test_scalar_none_is_null(self, compiler, user_model):
        assert compiler.compile_where(user_model.properties, {"bio": Scalar(value=None)}) == "`bio` IS NULL"


class TestCompileOrder:
    def test_single_string(self, compiler):
        assert compiler.compile_order("name") == "ORDER BY `name`"

    def test_directions(self, compiler):
        assert compiler.compile_order(["name", "age desc"]) == "ORDER BY `name`, `age` DESC"

    def test_invalid_direction(self, compiler):
        with pytest.raises(ValidationError):
            compiler.compile_order("name; DROP TABLE users")

    def test_too_many_tokens(self, compiler):
        with pytest.raises(ValidationError):
            compiler.compile_order("name ASC extra")

    def test_empty(self, compiler):
        assert compiler.compile_order([]) == ""


class TestCompileLimit:
    def test_without_skip(self, compiler):
        assert compiler.compile_limit(10, 0) == "LIMIT 10"

    def test_with_skip(self, compiler):
        assert compiler.compile_limit(10, 5) == "LIMIT 5, 10"


class TestCompileFilter:
    def test_full(self, compiler, user_model):
        f = Filter.build(where={"age": {"gt": 21}}, order="name", limit=10, skip=20)
        assert compiler.compile_filter(user_model.properties, f) == (
            "WHERE `age` > 21 ORDER BY `name` LIMIT 20, 10"
        )

    def test_empty(self, compiler, user_model):
        assert compiler.compile_filter(user_model.properties, Filter()) == ""

    def test_tagged_op(self, compiler, user_model):
        f = Filter(where={"age": Op(op=OpKind.LTE, operand="40")})
        assert compiler.compile_filter(user_model.properties, f) == "WHERE `age` <= 40"
