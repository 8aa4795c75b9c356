"""Pydantic schemas for chat requests, answers and history."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..common.schemas import TimestampSchema
from .models import MessageRole


class ChatRequest(BaseModel):
    """A question about a set of documents.

    ``message`` and ``selected_documents`` default to empty so that missing
    input is reported as a 400 by the service rather than a schema error.
    """

    message: str = Field(default="", description="User question")
    selected_documents: List[UUID] = Field(default_factory=list, description="Documents to answer from")
    notebook_id: Optional[UUID] = Field(default=None, description="Persist the exchange in this notebook")
    session_id: Optional[UUID] = Field(default=None, description="Chat session to append to")


class ChatSource(BaseModel):
    """A retrieved chunk the answer was grounded on."""

    document_id: UUID
    filename: str
    page_number: int
    similarity: float


class ChatAnswer(BaseModel):
    answer: str
    sources: List[ChatSource] = Field(default_factory=list)


class ChatResponse(ChatAnswer):
    """Answer plus the ids of the persisted messages, when persisted."""

    session_id: Optional[UUID] = None
    message_ids: List[UUID] = Field(default_factory=list)


class ChatSessionCreate(BaseModel):
    notebook_id: UUID
    title: Optional[str] = Field(default=None, max_length=255)


class ChatSessionRead(TimestampSchema):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    notebook_id: UUID
    user_id: str
    title: Optional[str] = None
    message_count: int = 0


class ChatMessageRead(TimestampSchema):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    notebook_id: UUID
    session_id: Optional[UUID] = None
    role: MessageRole
    content: str
