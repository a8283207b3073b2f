"""
Model schema definitions for ormysql.

These are the descriptors the host ORM hands over when it registers a
model. They are read-only once registered.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

PRIMARY_KEY = "id"


class PropertyType(str, Enum):
    """Supported property types."""

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    JSON = "json"
    POINT = "point"


class IndexSpec(BaseModel):
    """
    Index options attached to a single property or a composite index.

    Example:
        {"kind": "UNIQUE", "type": "BTREE"}
    """

    type: str | None = Field(default=None, description="Index method, e.g. BTREE or HASH")
    kind: str | None = Field(default=None, description="Index kind, e.g. UNIQUE or FULLTEXT")

    model_config = {"frozen": True}

    @field_validator("type", "kind")
    @classmethod
    def normalize_keyword(cls, v: str | None) -> str | None:
        """Upper-case keywords and reject anything that is not a plain word."""
        if v is None or not v.strip():
            return None
        v = v.strip().upper()
        if not v.replace("_", "").isalnum():
            raise ValueError(f"Invalid index keyword: {v!r}")
        return v


class PropertyDescriptor(BaseModel):
    """
    Type and constraint metadata for one model field.

    `index` is either None (no index), True (plain index) or an IndexSpec.
    """

    name: str
    type: PropertyType = PropertyType.STRING
    limit: int | None = Field(default=None, ge=1)
    nullable: bool = True
    index: IndexSpec | None = None

    model_config = {"frozen": True}

    @field_validator("index", mode="before")
    @classmethod
    def coerce_index(cls, v: object) -> object:
        if v is True:
            return IndexSpec()
        if v is False:
            return None
        return v


class CompositeIndex(BaseModel):
    """
    A named multi-column index.

    Example:
        {"columns": ["last_name", "first_name"], "kind": "UNIQUE"}
    """

    columns: list[str] = Field(..., min_length=1)
    type: str | None = None
    kind: str | None = None

    model_config = {"frozen": True}

    @field_validator("columns", mode="before")
    @classmethod
    def split_columns(cls, v: object) -> object:
        """Accept the "a, b" shorthand."""
        if isinstance(v, str):
            return [c.strip() for c in v.split(",") if c.strip()]
        return v

    @property
    def spec(self) -> IndexSpec:
        return IndexSpec(type=self.type, kind=self.kind)


class ModelSchema(BaseModel):
    """
    Declared schema of a model.

    A `None` value in `properties` or `indexes` marks a declared-but-disabled
    entry; schema sync treats it as absent.
    """

    name: str
    table: str | None = Field(default=None, description="Table name (defaults to model name)")
    properties: dict[str, PropertyDescriptor | None] = Field(default_factory=dict)
    indexes: dict[str, CompositeIndex | None] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def fill_property_names(cls, data: object) -> object:
        """Let properties be declared as {"age": {"type": "number"}}."""
        if isinstance(data, dict) and isinstance(data.get("properties"), dict):
            props = {}
            for name, prop in data["properties"].items():
                if isinstance(prop, dict) and "name" not in prop:
                    prop = {**prop, "name": name}
                props[name] = prop
            data = {**data, "properties": props}
        return data

    @property
    def table_name(self) -> str:
        return self.table or self.name

    @property
    def active_properties(self) -> dict[str, PropertyDescriptor]:
        """Enabled properties, primary key excluded."""
        return {
            name: prop
            for name, prop in self.properties.items()
            if prop is not None and name != PRIMARY_KEY
        }

    @property
    def active_indexes(self) -> dict[str, CompositeIndex]:
        """Enabled composite indexes."""
        return {name: idx for name, idx in self.indexes.items() if idx is not None}

    def get_property(self, name: str) -> PropertyDescriptor | None:
        """Get an enabled property descriptor by name."""
        return self.properties.get(name)
