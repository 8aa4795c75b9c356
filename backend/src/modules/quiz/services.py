"""Quiz generation from document chunks and answer grading."""

import json
import time
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.generation import GenerationService, get_generation_service
from ...infrastructure.logging import get_logger
from ..chunk.services import ChunkService
from ..common.exceptions import GenerationError, NoDocumentContentError, ValidationError
from ..common.utils.model_output import parse_model_json
from ..common.utils.rounding import round_half_up
from ..document.crud import document_crud
from .prompts import build_grading_prompt, build_quiz_prompt
from .schemas import Difficulty, QuizGenerateRequest, QuizQuestion, QuizResult, QuizSummary, QuizType

logger = get_logger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"
NO_CONTENT_MESSAGE = "No accessible document content found for quiz generation."


def make_question_id(index: int) -> str:
    """Build ``quiz_<ms timestamp>_<index>_<random>``."""
    return f"quiz_{int(time.time() * 1000)}_{index}_{uuid.uuid4().hex[:8]}"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_quiz_questions(text: str, quiz_type: QuizType) -> List[QuizQuestion]:
    """Parse model output into questions of ``quiz_type``.

    Accepts ``{"questions": [...]}`` or a bare array, optionally wrapped in
    markdown code fences.

    Raises:
        GenerationError: If the output is not JSON of one of those shapes.
    """
    try:
        data = parse_model_json(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse quiz output: {e}")
        raise GenerationError("Failed to generate valid quiz format") from e

    items = data.get("questions") if isinstance(data, dict) else data
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise GenerationError("Invalid quiz format generated")

    questions = []
    for index, item in enumerate(items):
        difficulty = _as_text(item.get("difficulty")).lower()
        options = None
        if quiz_type == QuizType.MCQ:
            raw_options = item.get("options")
            options = [_as_text(option) for option in raw_options] if isinstance(raw_options, list) else []

        questions.append(
            QuizQuestion(
                id=make_question_id(index),
                type=quiz_type,
                question=_as_text(item.get("question")),
                options=options,
                correct_answer=_as_text(item.get("correct_answer")),
                explanation=_as_text(item.get("explanation")),
                difficulty=Difficulty(difficulty) if difficulty in Difficulty._value2member_map_ else Difficulty.MEDIUM,
            )
        )
    return questions


class QuizGenerationService:
    """Generates a quiz from the chunks of documents in one notebook."""

    def __init__(self, generation_service: Optional[GenerationService] = None):
        self._generation_service = generation_service
        self.chunk_service = ChunkService()

    @property
    def generation_service(self) -> GenerationService:
        if self._generation_service is None:
            self._generation_service = get_generation_service()
        return self._generation_service

    async def collect_document_content(
        self,
        notebook_id: UUID,
        document_ids: Sequence[UUID],
        user_id: str,
        db: AsyncSession,
    ) -> List[Tuple[str, str]]:
        """Load ``(filename, chunk content)`` pairs in reading order.

        Documents outside the notebook or owned by someone else are skipped, and
        a repeated id is read once.
        """
        blocks: List[Tuple[str, str]] = []
        for document_id in dict.fromkeys(document_ids):
            document = await document_crud.get(db=db, id=document_id, user_id=user_id, notebook_id=notebook_id)
            if not document:
                logger.warning("Skipping inaccessible document", extra={"document_id": str(document_id)})
                continue

            chunks = await self.chunk_service.get_chunks_by_document(document_id, db)
            blocks.extend((document["filename"], chunk.content) for chunk in chunks)
        return blocks

    async def generate_questions(
        self,
        request: QuizGenerateRequest,
        user_id: str,
        db: AsyncSession,
    ) -> List[QuizQuestion]:
        """Generate questions of the first requested type.

        Raises:
            ValidationError: If the notebook or the documents are missing from the request.
            NoDocumentContentError: If none of the documents has accessible content.
            GenerationError: If the model output cannot be parsed.
        """
        if request.notebook_id is None or not request.document_ids:
            raise ValidationError("notebook_id and document_ids are required")

        quiz_type = request.types[0] if request.types else QuizType.MCQ

        blocks = await self.collect_document_content(request.notebook_id, request.document_ids, user_id, db)
        if not blocks:
            raise NoDocumentContentError(NO_CONTENT_MESSAGE)

        context = CONTEXT_SEPARATOR.join(f"Document: {filename}\n{content}" for filename, content in blocks)
        document_names = ", ".join(dict.fromkeys(filename for filename, _ in blocks))

        prompt = build_quiz_prompt(quiz_type, request.question_count, document_names, context)
        text = await self.generation_service.generate(prompt)

        questions = parse_quiz_questions(text, quiz_type)
        logger.info(
            "Quiz generated",
            extra={"quiz_type": quiz_type.value, "requested": request.question_count, "generated": len(questions)},
        )
        return questions


def answers_match(user_answer: str, correct_answer: str) -> bool:
    """Exact comparison ignoring case and surrounding whitespace."""
    return user_answer.strip().lower() == correct_answer.strip().lower()


def substring_match(user_answer: str, correct_answer: str) -> bool:
    """Case-insensitive containment in either direction.

    An empty answer is contained in every string and therefore matches.
    """
    user_lower = user_answer.lower()
    correct_lower = correct_answer.lower()
    return correct_lower in user_lower or user_lower in correct_lower


class QuizGradingService:
    """Grades submitted answers.

    Multiple choice answers are compared directly. Free-text answers are
    judged by the model one question at a time; when judging fails the
    substring heuristic decides.
    """

    def __init__(self, generation_service: Optional[GenerationService] = None):
        self._generation_service = generation_service

    @property
    def generation_service(self) -> GenerationService:
        if self._generation_service is None:
            self._generation_service = get_generation_service()
        return self._generation_service

    async def judge(self, question: QuizQuestion, user_answer: str) -> Tuple[bool, str]:
        """Ask the model whether a free-text answer is correct.

        Raises:
            GenerationError: If the verdict cannot be parsed.
        """
        prompt = build_grading_prompt(question.question, question.correct_answer, user_answer)
        text = await self.generation_service.generate(prompt, model=self.generation_service.grading_model)

        try:
            evaluation = parse_model_json(text)
        except json.JSONDecodeError as e:
            raise GenerationError(f"Unparsable evaluation: {e}") from e

        if not isinstance(evaluation, dict) or not isinstance(evaluation.get("isCorrect"), bool):
            raise GenerationError("Evaluation is missing a boolean isCorrect")

        return evaluation["isCorrect"], _as_text(evaluation.get("explanation")) or question.explanation

    async def grade_question(self, question: QuizQuestion, user_answer: str) -> QuizResult:
        if question.type == QuizType.MCQ:
            is_correct = answers_match(user_answer, question.correct_answer)
            explanation = question.explanation
        else:
            try:
                is_correct, explanation = await self.judge(question, user_answer)
            except Exception as e:
                logger.warning(f"Falling back to substring grading for {question.id}: {e}")
                is_correct = substring_match(user_answer, question.correct_answer)
                explanation = question.explanation

        return QuizResult(
            is_correct=is_correct,
            explanation=explanation,
            user_answer=user_answer,
            correct_answer=question.correct_answer,
        )

    async def grade(
        self,
        questions: Sequence[QuizQuestion],
        user_answers: Mapping[str, str],
    ) -> Tuple[Dict[str, QuizResult], QuizSummary]:
        """Grade every question in order.

        Returns:
            Results keyed by question id and the overall summary

        Raises:
            ValidationError: If there are no questions.
        """
        if not questions:
            raise ValidationError("Invalid quiz submission data")

        results: Dict[str, QuizResult] = {}
        for question in questions:
            results[question.id] = await self.grade_question(question, user_answers.get(question.id) or "")

        correct_answers = sum(1 for result in results.values() if result.is_correct)
        summary = QuizSummary(
            total_questions=len(questions),
            correct_answers=correct_answers,
            score=round_half_up(correct_answers / len(questions) * 100),
        )
        return results, summary
