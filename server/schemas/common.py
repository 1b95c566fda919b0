from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')


class CamelModel(BaseModel):
    """Response/request base serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str


class PaginatedResponse(BaseModel, Generic[T]):
    """Offset-paginated list response."""
    data: List[T]
    total: int
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    message: str
    path: Optional[str] = None
    fields: Optional[List[str]] = None
    reason: Optional[str] = None
