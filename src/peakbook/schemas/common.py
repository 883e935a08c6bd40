"""Shared response envelope and base schema."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(APIModel, Generic[T]):
    """Uniform envelope for every API response."""

    success: bool = Field(default=True, description="Whether the request succeeded")
    data: T | None = Field(default=None, description="Response payload")
    message: str | None = Field(default=None, description="Human readable status message")


class ErrorResponse(APIModel):
    """Envelope returned by the exception handlers."""

    success: bool = False
    message: str
