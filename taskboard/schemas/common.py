"""
Shared response shapes: the ``{success, message, data}`` envelope and
page metadata.
"""
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Uniform response envelope"""
    success: bool = True
    message: str
    data: Optional[T] = None


class Pagination(CamelModel):
    page: int = Field(..., description="Current page, 1-based")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total number of matching items")
    total_pages: int = Field(..., description="Number of pages")


class Page(CamelModel, Generic[T]):
    """Schema for a paginated list"""
    data: List[T]
    pagination: Pagination


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None


class MessageResponse(BaseModel):
    """Envelope for responses that carry no data"""
    success: bool = True
    message: str
