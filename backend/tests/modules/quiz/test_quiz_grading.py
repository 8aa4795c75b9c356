"""Tests for quiz grading."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.modules.common.exceptions import ValidationError
from src.modules.quiz.schemas import QuizQuestion, QuizType
from src.modules.quiz.services import QuizGradingService, answers_match, substring_match


def make_question(question_id: str, quiz_type: QuizType, correct_answer: str, explanation: str = "Because.") -> QuizQuestion:
    return QuizQuestion(
        id=question_id,
        type=quiz_type,
        question=f"Question {question_id}",
        options=["Paris", "Rome"] if quiz_type == QuizType.MCQ else None,
        correct_answer=correct_answer,
        explanation=explanation,
    )


@pytest.fixture
def generation_service():
    service = MagicMock()
    service.grading_model = "grading-model"
    service.generate = AsyncMock()
    return service


@pytest.fixture
def grading_service(generation_service):
    return QuizGradingService(generation_service=generation_service)


class TestAnswerMatching:
    def test_mcq_ignores_case_and_whitespace(self):
        assert answers_match("Paris ", "paris")
        assert answers_match("  PARIS", "Paris  ")
        assert not answers_match("Pariss", "Paris")

    @pytest.mark.parametrize(
        "user_answer,correct_answer,expected",
        [
            ("The mitochondria produce ATP", "mitochondria", True),
            ("ATP", "ATP synthase makes ATP", True),
            ("RIBOSOME", "ribosome", True),
            ("nucleus", "mitochondria", False),
            ("", "anything", True),
        ],
    )
    def test_substring_heuristic(self, user_answer, correct_answer, expected):
        assert substring_match(user_answer, correct_answer) is expected


class TestQuizGradingService:
    @pytest.mark.asyncio
    async def test_mcq_graded_without_model(self, grading_service, generation_service):
        question = make_question("q1", QuizType.MCQ, "Paris", explanation="Capital of France.")

        results, summary = await grading_service.grade([question], {"q1": "Paris "})

        assert results["q1"].is_correct is True
        assert results["q1"].explanation == "Capital of France."
        assert results["q1"].user_answer == "Paris "
        assert results["q1"].correct_answer == "Paris"
        assert summary.total_questions == 1
        assert summary.correct_answers == 1
        assert summary.score == 100
        generation_service.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_free_text_uses_judge(self, grading_service, generation_service):
        generation_service.generate.return_value = '```json\n{"isCorrect": false, "explanation": "Misses the key idea."}\n```'
        question = make_question("q1", QuizType.SAQ, "Water moving across a membrane")

        results, summary = await grading_service.grade([question], {"q1": "Water moves across a membrane"})

        assert results["q1"].is_correct is False
        assert results["q1"].explanation == "Misses the key idea."
        assert summary.score == 0
        generation_service.generate.assert_awaited_once()
        assert generation_service.generate.call_args.kwargs["model"] == "grading-model"

    @pytest.mark.asyncio
    async def test_unparsable_judge_falls_back_to_substring(self, grading_service, generation_service):
        generation_service.generate.return_value = "The answer looks right to me."
        question = make_question("q1", QuizType.SAQ, "mitochondria", explanation="Powerhouse of the cell.")

        results, _ = await grading_service.grade([question], {"q1": "The MITOCHONDRIA"})

        assert results["q1"].is_correct is True
        assert results["q1"].explanation == "Powerhouse of the cell."

    @pytest.mark.asyncio
    async def test_judge_error_falls_back_to_substring(self, grading_service, generation_service):
        generation_service.generate.side_effect = RuntimeError("quota exceeded")
        question = make_question("q1", QuizType.LAQ, "photosynthesis converts light energy")

        results, _ = await grading_service.grade([question], {"q1": "Respiration"})

        assert results["q1"].is_correct is False

    @pytest.mark.asyncio
    async def test_missing_answers_count_as_empty(self, grading_service):
        questions = [make_question("q1", QuizType.MCQ, "Paris"), make_question("q2", QuizType.MCQ, "Rome")]

        results, summary = await grading_service.grade(questions, {"q2": "rome"})

        assert results["q1"].user_answer == ""
        assert results["q1"].is_correct is False
        assert summary.correct_answers == 1
        assert summary.score == 50

    @pytest.mark.asyncio
    async def test_score_is_rounded(self, grading_service):
        questions = [make_question(f"q{i}", QuizType.MCQ, "Paris") for i in range(3)]

        _, summary = await grading_service.grade(questions, {"q0": "paris", "q1": "paris"})

        assert summary.score == 67

    @pytest.mark.asyncio
    async def test_judges_sequentially(self, grading_service, generation_service):
        generation_service.generate.return_value = '{"isCorrect": true, "explanation": "Good."}'
        questions = [make_question(f"q{i}", QuizType.SAQ, "answer") for i in range(3)]

        results, summary = await grading_service.grade(questions, {})

        assert generation_service.generate.await_count == 3
        assert summary.correct_answers == 3

    @pytest.mark.asyncio
    async def test_empty_submission(self, grading_service):
        with pytest.raises(ValidationError):
            await grading_service.grade([], {})
