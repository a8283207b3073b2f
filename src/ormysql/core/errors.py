"""
Error taxonomy for ormysql.

All ormysql errors inherit from OrmysqlError and include:
- A unique error code for programmatic handling
- A human-readable message
- Optional structured details

Errors raised by the database driver (SQLAlchemy / PyMySQL) are never
wrapped; they reach the caller unchanged.
"""

from typing import Any


class OrmysqlError(Exception):
    """
    Base class for all ormysql errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        details: Additional error context
    """

    code: str = "ORMYSQL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ModelNotRegisteredError(OrmysqlError):
    """The requested model was never defined on this adapter."""

    code = "MODEL_NOT_REGISTERED"

    def __init__(
        self,
        model: str,
        registered: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Model '{model}' is not registered",
            details={"model": model, "registered": registered or []},
            **kwargs,
        )


class ValidationError(OrmysqlError):
    """Input validation failed (bad filter, bad order token, bad schema)."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"field": field} if field else {},
            **kwargs,
        )
        self.field = field


class EncodingError(ValidationError):
    """A value cannot be rendered as a literal of its declared property type."""

    code = "ENCODING_ERROR"

    def __init__(
        self,
        value: Any,
        property_type: str,
        field: str | None = None,
    ) -> None:
        super().__init__(
            f"Cannot encode {value!r} as {property_type}",
            field=field,
        )
        self.value = value
        self.property_type = property_type
