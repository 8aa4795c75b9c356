"""Pydantic schemas for video recommendations."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class VideoRecommendationRequest(BaseModel):
    """Topic and optional grounding text; ``document_id`` stands in for the text."""

    topic: Optional[str] = Field(default=None, max_length=255)
    document_content: Optional[str] = None
    document_id: Optional[UUID] = None


class VideoRecommendation(BaseModel):
    title: str
    search_query: str
    url: str = Field(description="YouTube search results page for the query")


class VideoRecommendationResponse(BaseModel):
    success: bool = True
    topic: str
    videos: List[VideoRecommendation]
