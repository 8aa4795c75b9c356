"""Tests for ProgressService against PostgreSQL."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.common.exceptions import NotebookNotFoundError
from src.modules.progress.schemas import QuizAttemptCreate
from src.modules.progress.services import ProgressService
from src.modules.quiz.schemas import QuizType


def attempt(notebook_id: uuid.UUID, score: int, quiz_type: QuizType = QuizType.MCQ, **overrides) -> QuizAttemptCreate:
    data = {
        "notebook_id": notebook_id,
        "quiz_topic": f"Quiz scoring {score}",
        "quiz_type": quiz_type,
        "score": score,
        "total_questions": 4,
        "correct_answers": score * 4 // 100,
    }
    data.update(overrides)
    return QuizAttemptCreate(**data)


@pytest.fixture
def progress_service():
    return ProgressService()


class TestProgressService:
    @pytest.mark.asyncio
    async def test_record_and_report(self, db_session: AsyncSession, progress_service, user_id, test_notebook):
        notebook_id = test_notebook["id"]
        await progress_service.record_attempt(user_id, attempt(notebook_id, 50), db_session)
        await progress_service.record_attempt(user_id, attempt(notebook_id, 75, QuizType.SAQ), db_session)
        latest = await progress_service.record_attempt(user_id, attempt(notebook_id, 100), db_session)

        progress = await progress_service.get_progress(user_id, db_session)

        assert [a.score for a in progress.attempts] == [100, 75, 50]
        assert progress.attempts[0].id == latest.id
        assert progress.statistics.total_attempts == 3
        assert progress.statistics.average_score == 75
        assert progress.statistics.total_correct_answers == 9
        assert progress.statistics.total_questions == 12
        assert progress.statistics.quiz_type_breakdown == {"mcq": 2, "saq": 1}

    @pytest.mark.asyncio
    async def test_filters_and_limit(
        self, db_session: AsyncSession, progress_service, user_id, test_notebook, other_notebook
    ):
        for score in (25, 50, 75):
            await progress_service.record_attempt(user_id, attempt(test_notebook["id"], score), db_session)
        await progress_service.record_attempt("user-2", attempt(other_notebook["id"], 100), db_session)

        limited = await progress_service.get_progress(user_id, db_session, limit=2)
        assert [a.score for a in limited.attempts] == [75, 50]

        other = await progress_service.get_progress(user_id, db_session, notebook_id=other_notebook["id"])
        assert other.attempts == []
        assert other.statistics.average_score == 0

    @pytest.mark.asyncio
    async def test_document_reference(
        self, db_session: AsyncSession, progress_service, user_id, test_notebook, document_factory
    ):
        document = await document_factory(test_notebook["id"], user_id, "cells.pdf")

        recorded = await progress_service.record_attempt(
            user_id, attempt(test_notebook["id"], 50, document_id=document.id), db_session
        )

        assert recorded.document_id == document.id

    @pytest.mark.asyncio
    async def test_notebook_of_another_user(self, db_session: AsyncSession, progress_service, user_id, other_notebook):
        with pytest.raises(NotebookNotFoundError):
            await progress_service.record_attempt(user_id, attempt(other_notebook["id"], 50), db_session)
