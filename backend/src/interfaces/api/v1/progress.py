"""Progress API endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ....modules.progress.schemas import ProgressResponse, QuizAttemptCreate, QuizAttemptRead
from ....modules.progress.services import ProgressService
from ..dependencies import CurrentUserId, DbSession, get_progress_service

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Record Quiz Attempt",
    responses={
        201: {"description": "Attempt recorded"},
        404: {"description": "Notebook not found"},
    },
)
async def record_attempt(
    attempt_data: QuizAttemptCreate,
    user_id: CurrentUserId,
    db: DbSession,
    progress_service: ProgressService = Depends(get_progress_service),
) -> QuizAttemptRead:
    """Store a quiz attempt summary."""
    try:
        return await progress_service.record_attempt(user_id, attempt_data, db)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Recording quiz attempt")


@router.get(
    "",
    summary="Get Progress",
    description="""
    Returns the most recent quiz attempts and statistics computed over them.

    - **notebook_id**: Restrict to one notebook
    - **limit**: Number of attempts (default: 20, max: 100)
    """,
)
async def get_progress(
    user_id: CurrentUserId,
    db: DbSession,
    notebook_id: Annotated[Optional[UUID], Query(description="Notebook ID")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Number of attempts")] = 20,
    progress_service: ProgressService = Depends(get_progress_service),
) -> ProgressResponse:
    """Get quiz progress."""
    try:
        return await progress_service.get_progress(user_id, db, notebook_id=notebook_id, limit=limit)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Loading progress")
