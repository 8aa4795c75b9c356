"""Quiz API endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from ....modules.common.utils.error_handler import handle_exception, unexpected_error
from ....modules.progress.schemas import QuizAttemptCreate
from ....modules.progress.services import ProgressService
from ....modules.quiz.schemas import QuizGenerateRequest, QuizGenerateResponse, QuizSubmitRequest, QuizSubmitResponse
from ....modules.quiz.services import QuizGenerationService, QuizGradingService
from ..dependencies import (
    CurrentUserId,
    DbSession,
    get_progress_service,
    get_quiz_generation_service,
    get_quiz_grading_service,
)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


@router.post(
    "/generate",
    summary="Generate Quiz",
    description="""
    Generates quiz questions from documents in a notebook.

    - **notebook_id**: Notebook the documents belong to
    - **document_ids**: Documents to draw questions from
    - **question_count**: Number of questions (1-20, default: 5)
    - **types**: Question types (`mcq`, `saq`, `laq`); only the first is used
    """,
    responses={
        200: {"description": "Generated questions"},
        400: {"description": "Missing notebook or documents"},
        404: {"description": "No accessible document content"},
        500: {"description": "The model returned an unusable quiz"},
    },
)
async def generate_quiz(
    request: QuizGenerateRequest,
    user_id: CurrentUserId,
    db: DbSession,
    generation_service: QuizGenerationService = Depends(get_quiz_generation_service),
) -> QuizGenerateResponse:
    """Generate a quiz."""
    try:
        questions = await generation_service.generate_questions(request, user_id, db)
        return QuizGenerateResponse(success=True, questions=questions)
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Generating quiz")


@router.post(
    "/submit",
    summary="Submit Quiz Answers",
    description="""
    Grades answers keyed by question id.

    Multiple choice answers are compared ignoring case and surrounding
    whitespace; short and long answers are judged by the model. When
    `notebook_id` is given and `record_attempt` is true, the summary is
    stored as a quiz attempt.
    """,
    responses={
        200: {"description": "Per-question results and summary"},
        400: {"description": "Empty submission"},
        404: {"description": "Notebook not found when recording the attempt"},
    },
)
async def submit_quiz(
    submission: QuizSubmitRequest,
    user_id: CurrentUserId,
    db: DbSession,
    grading_service: QuizGradingService = Depends(get_quiz_grading_service),
    progress_service: ProgressService = Depends(get_progress_service),
) -> QuizSubmitResponse:
    """Grade a quiz submission."""
    try:
        results, summary = await grading_service.grade(submission.questions, submission.user_answers)
        response = QuizSubmitResponse(success=True, results=results, summary=summary)

        if submission.notebook_id is not None and submission.record_attempt:
            quiz_type = submission.questions[0].type
            topic = submission.quiz_topic or f"{quiz_type.value.upper()} Quiz - {datetime.now(UTC):%Y-%m-%d}"
            attempt = await progress_service.record_attempt(
                user_id,
                QuizAttemptCreate(
                    notebook_id=submission.notebook_id,
                    document_id=submission.document_id,
                    quiz_topic=topic,
                    quiz_type=quiz_type,
                    score=summary.score,
                    total_questions=summary.total_questions,
                    correct_answers=summary.correct_answers,
                ),
                db,
            )
            response.attempt_id = attempt.id

        return response
    except Exception as e:
        http_exc = handle_exception(e)
        if http_exc:
            raise http_exc
        raise unexpected_error(e, "Submitting quiz")
