"""Shared API schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ResultResponse(CamelModel):
    """Success flag with an optional error string."""

    success: bool = True
    error: str | None = None


class ErrorResponse(CamelModel):
    """Failure payload produced by the exception handlers."""

    success: bool = False
    error: str
    code: str
