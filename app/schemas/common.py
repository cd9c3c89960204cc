"""Common schema utilities and base classes."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CamelSchema(BaseSchema):
    """Schema whose wire names are camelCase (``roll_no`` <-> ``rollNo``)."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )


T = TypeVar("T")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Paginated response wrapper."""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class SuccessResponse(BaseSchema):
    """Standard success envelope used by every REST endpoint."""

    success: bool = True
    message: str | None = None
    data: Any = None


class MessageResponse(BaseSchema):
    """Success envelope without a payload."""

    success: bool = True
    message: str
