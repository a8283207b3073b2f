"""
Tests for model schema types and the registry.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from ormysql.core.errors import ModelNotRegisteredError
from ormysql.core.registry import SchemaRegistry
from ormysql.core.types import (
    CompositeIndex,
    IndexSpec,
    ModelSchema,
    PropertyDescriptor,
    PropertyType,
)


class TestPropertyDescriptor:
    def test_defaults(self):
        p = PropertyDescriptor(name="title")
        assert p.type == PropertyType.STRING
        assert p.nullable is True
        assert p.limit is None
        assert p.index is None

    def test_index_true_becomes_plain_spec(self):
        p = PropertyDescriptor(name="title", index=True)
        assert p.index == IndexSpec()

    def test_index_keywords_are_upper_cased(self):
        p = PropertyDescriptor(name="title", index={"kind": "unique", "type": "btree"})
        assert p.index.kind == "UNIQUE"
        assert p.index.type == "BTREE"

    def test_index_keyword_rejects_sql(self):
        with pytest.raises(PydanticValidationError):
            IndexSpec(kind="UNIQUE; DROP TABLE x")

    def test_frozen(self):
        p = PropertyDescriptor(name="title")
        with pytest.raises(PydanticValidationError):
            p.name = "other"

    def test_unknown_type_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertyDescriptor(name="x", type="float")


class TestCompositeIndex:
    def test_columns_from_string(self):
        idx = CompositeIndex(columns="last_name, first_name")
        assert idx.columns == ["last_name", "first_name"]

    def test_columns_required(self):
        with pytest.raises(PydanticValidationError):
            CompositeIndex(columns=[])


class TestModelSchema:
    def test_property_names_filled_from_keys(self, user_model):
        assert user_model.properties["age"].name == "age"
        assert user_model.properties["age"].type == PropertyType.NUMBER

    def test_table_name_defaults_to_model_name(self, empty_model, user_model):
        assert empty_model.table_name == "Counter"
        assert user_model.table_name == "users"

    def test_active_properties_skip_disabled_and_primary_key(self):
        model = ModelSchema.model_validate({
            "name": "Post",
            "properties": {
                "id": {"type": "number"},
                "title": {"type": "string"},
                "legacy": None,
            },
        })
        assert list(model.active_properties) == ["title"]

    def test_active_indexes_skip_disabled(self):
        model = ModelSchema.model_validate({
            "name": "Post",
            "properties": {"a": {}, "b": {}},
            "indexes": {"ab": {"columns": ["a", "b"]}, "old": None},
        })
        assert list(model.active_indexes) == ["ab"]


class TestSchemaRegistry:
    def test_define_and_get(self, user_model):
        registry = SchemaRegistry()
        registry.define(user_model)
        assert registry.get("User") is user_model
        assert "User" in registry
        assert len(registry) == 1

    def test_define_from_dict(self):
        registry = SchemaRegistry()
        model = registry.define({"name": "Tag", "properties": {"label": {}}})
        assert registry.get("Tag") == model

    def test_unknown_model(self, user_model):
        registry = SchemaRegistry([user_model])
        with pytest.raises(ModelNotRegisteredError) as exc:
            registry.get("Missing")
        assert exc.value.code == "MODEL_NOT_REGISTERED"
        assert exc.value.details["registered"] == ["User"]

    def test_registries_are_independent(self, user_model):
        a = SchemaRegistry([user_model])
        b = SchemaRegistry()
        assert "User" in a
        assert "User" not in b

    def test_iteration_order(self, user_model, empty_model):
        registry = SchemaRegistry([user_model, empty_model])
        assert [m.name for m in registry] == ["User", "Counter"]
        assert registry.names() == ["User", "Counter"]
