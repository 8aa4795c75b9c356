"""Chat API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....modules.chat.schemas import ChatMessageRead, ChatRequest, ChatResponse, ChatSessionCreate, ChatSessionRead
from ....modules.chat.services import ChatHistoryService, ChatService
from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ..dependencies import CurrentUserId, DbSession, get_chat_history_service, get_chat_service

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "",
    summary="Ask The Documents",
    description="""
    Answers a question using only the selected documents.

    The question is embedded, the most similar chunks of every selected
    document are merged and the top 5 are given to the model as context.
    When nothing relevant is found a fixed apology is returned.

    - **message**: The question
    - **selected_documents**: Document IDs to answer from
    - **notebook_id**: When given, the question and answer are saved in the notebook's history
    - **session_id**: Chat session to save the exchange in
    """,
    responses={
        200: {"description": "Answer with the chunks it was grounded on"},
        400: {"description": "Missing question or documents"},
        404: {"description": "Notebook or chat session not found"},
    },
)
async def chat(
    request: ChatRequest,
    user_id: CurrentUserId,
    db: DbSession,
    chat_service: ChatService = Depends(get_chat_service),
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> ChatResponse:
    """Answer a question from the selected documents."""
    try:
        result = await chat_service.answer(request.message, request.selected_documents, db, user_id=user_id)

        response = ChatResponse(answer=result.answer, sources=result.sources, session_id=request.session_id)
        if request.notebook_id is not None:
            messages = await history_service.record_exchange(
                request.notebook_id, user_id, request.message, result.answer, db, session_id=request.session_id
            )
            response.message_ids = [message.id for message in messages]
        return response
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Chat")


@router.post(
    "/sessions",
    status_code=status.HTTP_201_CREATED,
    summary="Create Chat Session",
    responses={
        201: {"description": "Session created with a server-issued id"},
        404: {"description": "Notebook not found"},
    },
)
async def create_session(
    session_data: ChatSessionCreate,
    user_id: CurrentUserId,
    db: DbSession,
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> ChatSessionRead:
    """Create a chat session."""
    try:
        return await history_service.create_session(session_data.notebook_id, user_id, db, title=session_data.title)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Creating chat session")


@router.get(
    "/sessions",
    summary="List Chat Sessions",
    description="Lists a notebook's chat sessions, most recently active first, with message counts.",
)
async def list_sessions(
    user_id: CurrentUserId,
    db: DbSession,
    notebook_id: Annotated[UUID, Query(description="Notebook ID")],
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> List[ChatSessionRead]:
    """List chat sessions."""
    try:
        return await history_service.list_sessions(notebook_id, user_id, db)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Listing chat sessions")


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Chat Session",
    responses={
        204: {"description": "Session and its messages deleted"},
        404: {"description": "Chat session not found"},
    },
)
async def delete_session(
    session_id: UUID,
    user_id: CurrentUserId,
    db: DbSession,
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> None:
    """Delete a chat session."""
    try:
        deleted = await history_service.delete_session(session_id, user_id, db)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat session not found")
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Deleting chat session")


@router.get(
    "/messages",
    summary="List Chat Messages",
    description="""
    Lists messages in conversation order. Without `session_id`, only the
    messages saved outside any session are returned.
    """,
)
async def list_messages(
    user_id: CurrentUserId,
    db: DbSession,
    notebook_id: Annotated[UUID, Query(description="Notebook ID")],
    session_id: Annotated[Optional[UUID], Query(description="Chat session ID")] = None,
    history_service: ChatHistoryService = Depends(get_chat_history_service),
) -> List[ChatMessageRead]:
    """List chat messages."""
    try:
        return await history_service.list_messages(notebook_id, user_id, db, session_id=session_id)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Listing chat messages")
