"""Retrieval-augmented chat and chat history."""

from datetime import UTC, datetime
from typing import Any, List, Optional, Sequence, cast
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.generation import GenerationService, get_generation_service
from ...infrastructure.logging import get_logger
from ..common.constants import NO_CONTEXT_ANSWER
from ..common.exceptions import ChatSessionNotFoundError, NotebookNotFoundError
from ..notebook.services import NotebookService
from ..retrieval.services import RetrievalService
from .crud import chat_message_crud, chat_session_crud
from .models import ChatMessage, ChatSession, MessageRole
from .prompts import build_chat_prompt, build_context
from .schemas import ChatAnswer, ChatMessageRead, ChatSessionRead, ChatSource

logger = get_logger(__name__)

SESSION_TITLE_LENGTH = 50


class ChatService:
    """Answers questions from the selected documents only.

    When retrieval finds nothing the model is not called and a fixed apology
    is returned instead.
    """

    def __init__(
        self,
        retrieval_service: Optional[RetrievalService] = None,
        generation_service: Optional[GenerationService] = None,
    ):
        self.retrieval_service = retrieval_service or RetrievalService()
        self._generation_service = generation_service

    @property
    def generation_service(self) -> GenerationService:
        if self._generation_service is None:
            self._generation_service = get_generation_service()
        return self._generation_service

    async def answer(
        self,
        question: str,
        document_ids: Sequence[UUID],
        db: AsyncSession,
        user_id: Optional[str] = None,
    ) -> ChatAnswer:
        """Answer ``question`` grounded on the most relevant chunks.

        Args:
            question: User question
            document_ids: Selected documents
            db: Database session
            user_id: Owner filter for the documents

        Returns:
            The answer text and the chunks it was grounded on
        """
        matches = await self.retrieval_service.retrieve(question, document_ids, db, user_id=user_id)
        if not matches:
            return ChatAnswer(answer=NO_CONTEXT_ANSWER)

        prompt = build_chat_prompt(question, build_context(matches))
        answer = await self.generation_service.generate(prompt)

        sources = [
            ChatSource(
                document_id=match.document_id,
                filename=match.filename,
                page_number=match.page_number,
                similarity=match.similarity,
            )
            for match in matches
        ]
        return ChatAnswer(answer=answer, sources=sources)


class ChatHistoryService:
    """Chat sessions and persisted messages of a notebook."""

    def __init__(self):
        self.notebook_service = NotebookService()

    async def _require_notebook(self, notebook_id: UUID, user_id: str, db: AsyncSession) -> None:
        if not await self.notebook_service.notebook_exists(notebook_id, user_id, db):
            raise NotebookNotFoundError(f"Notebook {notebook_id} not found")

    async def _require_session(self, session_id: UUID, notebook_id: UUID, user_id: str, db: AsyncSession) -> None:
        exists = await chat_session_crud.exists(db=db, id=session_id, notebook_id=notebook_id, user_id=user_id)
        if not exists:
            raise ChatSessionNotFoundError(f"Chat session {session_id} not found")

    async def create_session(
        self,
        notebook_id: UUID,
        user_id: str,
        db: AsyncSession,
        title: Optional[str] = None,
    ) -> ChatSessionRead:
        """Create an empty session with a server-issued id."""
        await self._require_notebook(notebook_id, user_id, db)

        class ChatSessionCreateInternal(BaseModel):
            notebook_id: UUID
            user_id: str
            title: str | None = None

        created = cast(
            Any,
            await chat_session_crud.create(
                db=db, object=ChatSessionCreateInternal(notebook_id=notebook_id, user_id=user_id, title=title)
            ),
        )
        return ChatSessionRead.model_validate(created)

    async def list_sessions(self, notebook_id: UUID, user_id: str, db: AsyncSession) -> List[ChatSessionRead]:
        """List a notebook's sessions, most recently updated first, with message counts."""
        stmt = (
            select(ChatSession, func.count(ChatMessage.id).label("message_count"))
            .outerjoin(ChatMessage, ChatMessage.session_id == ChatSession.id)
            .where(ChatSession.notebook_id == notebook_id, ChatSession.user_id == user_id)
            .group_by(ChatSession.id)
            .order_by(ChatSession.updated_at.desc())
        )
        result = await db.execute(stmt)

        sessions = []
        for row in result.all():
            session = ChatSessionRead.model_validate(row[0])
            session.message_count = row.message_count
            sessions.append(session)
        return sessions

    async def delete_session(self, session_id: UUID, user_id: str, db: AsyncSession) -> bool:
        """Delete a session and its messages.

        Returns:
            True if the session existed and was deleted
        """
        if not await chat_session_crud.exists(db=db, id=session_id, user_id=user_id):
            return False

        await chat_session_crud.delete(db=db, id=session_id, user_id=user_id)
        return True

    async def list_messages(
        self,
        notebook_id: UUID,
        user_id: str,
        db: AsyncSession,
        session_id: Optional[UUID] = None,
    ) -> List[ChatMessageRead]:
        """List messages in conversation order.

        Without ``session_id`` only messages outside any session are returned.
        """
        await self._require_notebook(notebook_id, user_id, db)

        stmt = select(ChatMessage).where(ChatMessage.notebook_id == notebook_id, ChatMessage.user_id == user_id)
        if session_id is None:
            stmt = stmt.where(ChatMessage.session_id.is_(None))
        else:
            stmt = stmt.where(ChatMessage.session_id == session_id)
        stmt = stmt.order_by(ChatMessage.created_at)

        result = await db.execute(stmt)
        return [ChatMessageRead.model_validate(message) for message in result.scalars()]

    async def add_message(
        self,
        notebook_id: UUID,
        user_id: str,
        role: MessageRole,
        content: str,
        db: AsyncSession,
        session_id: Optional[UUID] = None,
    ) -> ChatMessageRead:
        class ChatMessageCreateInternal(BaseModel):
            notebook_id: UUID
            user_id: str
            role: str
            content: str
            session_id: UUID | None = None

        created = cast(
            Any,
            await chat_message_crud.create(
                db=db,
                object=ChatMessageCreateInternal(
                    notebook_id=notebook_id,
                    user_id=user_id,
                    role=role.value,
                    content=content,
                    session_id=session_id,
                ),
            ),
        )
        return ChatMessageRead.model_validate(created)

    async def record_exchange(
        self,
        notebook_id: UUID,
        user_id: str,
        question: str,
        answer: str,
        db: AsyncSession,
        session_id: Optional[UUID] = None,
    ) -> List[ChatMessageRead]:
        """Persist a question and its answer.

        The first question of an untitled session becomes the session title.

        Raises:
            NotebookNotFoundError: If the notebook is missing or not owned.
            ChatSessionNotFoundError: If the session does not belong to the notebook.
        """
        await self._require_notebook(notebook_id, user_id, db)

        if session_id is not None:
            await self._require_session(session_id, notebook_id, user_id, db)
            await db.execute(
                update(ChatSession)
                .where(ChatSession.id == session_id)
                .values(
                    title=func.coalesce(ChatSession.title, question[:SESSION_TITLE_LENGTH]),
                    updated_at=datetime.now(UTC),
                )
            )

        user_message = await self.add_message(notebook_id, user_id, MessageRole.USER, question, db, session_id)
        assistant_message = await self.add_message(
            notebook_id, user_id, MessageRole.ASSISTANT, answer, db, session_id
        )

        return [user_message, assistant_message]
