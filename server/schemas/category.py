from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from schemas.common import CamelModel


class CategoryRequest(BaseModel):
    """Create or update a category."""
    name: Optional[str] = Field(None, max_length=255)
    code: Optional[str] = Field(None, max_length=16, description="Letters only, e.g. ELEC")


class CategoryResponse(CamelModel):
    """Category response."""
    id: int
    name: str
    code: str
    created_at: datetime


class LocationRequest(BaseModel):
    """Create or update a location."""
    name: Optional[str] = Field(None, max_length=255)


class LocationResponse(CamelModel):
    """Location response."""
    id: int
    name: str
    created_at: datetime
