"""Pydantic schemas for chunk entities."""

from typing import Annotated, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...infrastructure.config.settings import get_settings


class PageChunk(BaseModel):
    """A piece of page text ready to be embedded."""

    page_number: Annotated[int, Field(ge=1, description="1-based page number")]
    chunk_index: Annotated[int, Field(ge=0, description="Position of the chunk within its page")]
    content: Annotated[str, Field(min_length=1, description="Chunk text")]


class ChunkCreate(PageChunk):
    """Schema for storing an embedded chunk."""

    document_id: UUID
    embedding: Annotated[List[float], Field(description="Vector embedding representation")]

    @field_validator("embedding")
    @classmethod
    def validate_embedding(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("Embedding cannot be empty")
        expected = get_settings().EMBEDDING_DIMENSION
        if len(v) != expected:
            raise ValueError(f"Embedding has {len(v)} dimensions, expected {expected}")
        return v


class ChunkRead(PageChunk):
    """Schema for reading chunk data without its embedding."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID


class ChunkMatch(BaseModel):
    """A chunk returned by similarity search.

    ``similarity`` is ``1 - cosine distance``; higher is closer.
    """

    chunk_id: UUID
    document_id: UUID
    filename: str
    page_number: int
    chunk_index: int = 0
    content: str
    similarity: float
