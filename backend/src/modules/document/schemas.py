"""Pydantic schemas for document entities."""

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..common.schemas import TimestampSchema
from .models import DocumentStatus


class DocumentRead(TimestampSchema):
    """Schema for reading document data."""

    id: UUID
    notebook_id: UUID
    user_id: str
    filename: str
    storage_path: Optional[str] = None
    file_size: Optional[int] = None
    page_count: int = 0
    status: DocumentStatus = DocumentStatus.PROCESSING
    chunk_count: int = Field(default=0, description="Number of embedded chunks")


class DocumentListResponse(BaseModel):
    """Schema for paginated document list response."""

    data: List[DocumentRead]
    total_count: int
    has_more: bool
    page: int
    items_per_page: int


class DocumentEmbedRequest(BaseModel):
    """Request to make sure a document has embedded chunks."""

    document_id: Optional[UUID] = Field(default=None, description="Document to embed")


class DocumentEmbedResponse(BaseModel):
    """Outcome of an embed request."""

    success: bool = True
    document_id: UUID
    status: Literal["already_embedded", "embedded", "processing"]
    chunk_count: int
