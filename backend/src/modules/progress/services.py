"""Quiz attempt recording and progress analytics."""

from collections import Counter
from typing import Any, List, Optional, Sequence, cast
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..common.exceptions import NotebookNotFoundError
from ..common.utils.rounding import round_half_up
from ..notebook.services import NotebookService
from .crud import quiz_attempt_crud
from .models import QuizAttempt
from .schemas import ProgressResponse, ProgressStatistics, QuizAttemptCreate, QuizAttemptRead

logger = get_logger(__name__)

RECENT_ACTIVITY_SIZE = 5


def compute_statistics(attempts: Sequence[QuizAttemptRead]) -> ProgressStatistics:
    """Aggregate attempts that are already ordered most recent first."""
    if not attempts:
        return ProgressStatistics()

    return ProgressStatistics(
        total_attempts=len(attempts),
        average_score=round_half_up(sum(attempt.score for attempt in attempts) / len(attempts)),
        total_correct_answers=sum(attempt.correct_answers for attempt in attempts),
        total_questions=sum(attempt.total_questions for attempt in attempts),
        quiz_type_breakdown=dict(Counter(attempt.quiz_type.value for attempt in attempts)),
        recent_activity=list(attempts[:RECENT_ACTIVITY_SIZE]),
    )


class ProgressService:
    """Stores quiz summaries and reports a user's progress."""

    def __init__(self):
        self.notebook_service = NotebookService()

    async def record_attempt(
        self,
        user_id: str,
        attempt_data: QuizAttemptCreate,
        db: AsyncSession,
    ) -> QuizAttemptRead:
        """Store a quiz attempt in one of the user's notebooks.

        Raises:
            NotebookNotFoundError: If the notebook is missing or not owned.
        """
        if not await self.notebook_service.notebook_exists(attempt_data.notebook_id, user_id, db):
            raise NotebookNotFoundError(f"Notebook {attempt_data.notebook_id} not found")

        class QuizAttemptCreateInternal(BaseModel):
            notebook_id: UUID
            user_id: str
            document_id: UUID | None = None
            quiz_topic: str
            quiz_type: str
            score: int
            total_questions: int
            correct_answers: int

        attempt_internal = QuizAttemptCreateInternal(
            user_id=user_id, **attempt_data.model_dump(exclude={"quiz_type"}), quiz_type=attempt_data.quiz_type.value
        )
        created = cast(Any, await quiz_attempt_crud.create(db=db, object=attempt_internal))

        logger.info("Quiz attempt recorded", extra={"notebook_id": str(attempt_data.notebook_id)})
        return QuizAttemptRead.model_validate(created)

    async def get_attempts(
        self,
        user_id: str,
        db: AsyncSession,
        notebook_id: Optional[UUID] = None,
        limit: int = 20,
    ) -> List[QuizAttemptRead]:
        stmt = select(QuizAttempt).where(QuizAttempt.user_id == user_id)
        if notebook_id is not None:
            stmt = stmt.where(QuizAttempt.notebook_id == notebook_id)
        stmt = stmt.order_by(QuizAttempt.created_at.desc()).limit(limit)

        result = await db.execute(stmt)
        return [QuizAttemptRead.model_validate(attempt) for attempt in result.scalars()]

    async def get_progress(
        self,
        user_id: str,
        db: AsyncSession,
        notebook_id: Optional[UUID] = None,
        limit: int = 20,
    ) -> ProgressResponse:
        """Recent attempts and statistics computed over them."""
        attempts = await self.get_attempts(user_id, db, notebook_id=notebook_id, limit=limit)
        return ProgressResponse(attempts=attempts, statistics=compute_statistics(attempts))
