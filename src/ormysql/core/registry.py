"""
Per-adapter schema registry.

Each adapter instance owns one registry; there is no module-level lookup.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ormysql.core.errors import ModelNotRegisteredError
from ormysql.core.types import ModelSchema


class SchemaRegistry:
    """
    Mapping of model name to declared ModelSchema.

    Usage:
        registry = SchemaRegistry()
        registry.define({"name": "User", "properties": {"email": {"type": "string"}}})
        registry.get("User").table_name
    """

    def __init__(self, models: list[ModelSchema] | None = None) -> None:
        self._models: dict[str, ModelSchema] = {}
        for model in models or []:
            self.define(model)

    def define(self, model: ModelSchema | dict[str, Any]) -> ModelSchema:
        """Register (or replace) a model schema."""
        if not isinstance(model, ModelSchema):
            model = ModelSchema.model_validate(model)
        self._models[model.name] = model
        return model

    def get(self, name: str) -> ModelSchema:
        """Get a registered model, raising if it is unknown."""
        try:
            return self._models[name]
        except KeyError:
            raise ModelNotRegisteredError(name, registered=self.names()) from None

    def names(self) -> list[str]:
        return list(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[ModelSchema]:
        return iter(list(self._models.values()))

    def __len__(self) -> int:
        return len(self._models)
