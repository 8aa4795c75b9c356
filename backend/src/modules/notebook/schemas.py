"""Pydantic schemas for notebook entities."""

from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..common.schemas import TimestampSchema


class NotebookBase(BaseModel):
    """Base schema for notebook data."""

    title: Annotated[str, Field(min_length=1, max_length=255, description="Notebook title")]
    description: Optional[str] = Field(default=None, max_length=2000, description="Notebook description")


class NotebookCreate(NotebookBase):
    """Schema for creating a new notebook."""

    is_featured: bool = Field(default=False, description="Pin the notebook at the top of the dashboard")


class NotebookUpdate(BaseModel):
    """Schema for updating an existing notebook."""

    title: Optional[Annotated[str, Field(min_length=1, max_length=255)]] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    is_featured: Optional[bool] = None


class NotebookRead(TimestampSchema, NotebookBase):
    """Schema for reading notebook data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    source_count: int = Field(default=0, description="Number of documents in the notebook")
    is_featured: bool = False


class NotebookListResponse(BaseModel):
    """Schema for paginated notebook list response."""

    data: List[NotebookRead]
    total_count: int
    has_more: bool
    page: int
    items_per_page: int
