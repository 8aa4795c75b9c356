"""FastAPI dependencies for use in API endpoints."""

from typing import Annotated, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.database import async_session
from ...infrastructure.logging import get_logger
from ...modules.chat.services import ChatHistoryService, ChatService
from ...modules.common.exceptions import AuthenticationError
from ...modules.document.services import DocumentService
from ...modules.ingestion.services import IngestionService
from ...modules.notebook.services import NotebookService
from ...modules.progress.services import ProgressService
from ...modules.quiz.services import QuizGenerationService, QuizGradingService
from ...modules.seeding.services import SeedingService
from ...modules.video.services import VideoService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(async_session)]


def decode_user_id(token: str, settings: Settings) -> str:
    """Verify a bearer token and return its ``sub`` claim.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject,
            or no signing secret is configured.
    """
    if not settings.AUTH_JWT_SECRET:
        logger.error("AUTH_JWT_SECRET is not set, rejecting bearer token")
        raise AuthenticationError("Invalid or expired token")

    audience = settings.AUTH_JWT_AUDIENCE
    try:
        claims = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid or expired token") from e

    user_id = claims.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Token has no subject")
    return user_id


def get_current_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> str:
    """Dependency resolving the authenticated user id from ``Authorization: Bearer``."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Not authenticated")
    return decode_user_id(credentials.credentials, get_settings())


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_notebook_service() -> NotebookService:
    """Dependency for providing a NotebookService instance."""
    return NotebookService()


def get_document_service() -> DocumentService:
    """Dependency for providing a DocumentService instance."""
    return DocumentService()


def get_ingestion_service() -> IngestionService:
    """Dependency for providing an IngestionService instance."""
    return IngestionService()


def get_chat_service() -> ChatService:
    """Dependency for providing a ChatService instance."""
    return ChatService()


def get_chat_history_service() -> ChatHistoryService:
    """Dependency for providing a ChatHistoryService instance."""
    return ChatHistoryService()


def get_quiz_generation_service() -> QuizGenerationService:
    """Dependency for providing a QuizGenerationService instance."""
    return QuizGenerationService()


def get_quiz_grading_service() -> QuizGradingService:
    """Dependency for providing a QuizGradingService instance."""
    return QuizGradingService()


def get_progress_service() -> ProgressService:
    """Dependency for providing a ProgressService instance."""
    return ProgressService()


def get_video_service() -> VideoService:
    """Dependency for providing a VideoService instance."""
    return VideoService()


def get_seeding_service() -> SeedingService:
    """Dependency for providing a SeedingService instance."""
    return SeedingService()
