"""Tests for parsing generated quizzes."""

import re

import pytest

from src.modules.common.exceptions import GenerationError
from src.modules.quiz.schemas import Difficulty, QuizType
from src.modules.quiz.services import make_question_id, parse_quiz_questions

MCQ_OUTPUT = """```json
{
  "questions": [
    {
      "type": "mcq",
      "question": "What is the capital of France?",
      "options": ["Berlin", "Paris", "Rome", "Madrid"],
      "correct_answer": "Paris",
      "explanation": "Paris is the capital of France.",
      "difficulty": "easy"
    },
    {
      "question": "Which organelle produces ATP?",
      "options": ["Nucleus", "Mitochondrion", "Ribosome", "Golgi body"],
      "correct_answer": "Mitochondrion"
    }
  ]
}
```"""


class TestParseQuizQuestions:
    def test_object_with_questions(self):
        questions = parse_quiz_questions(MCQ_OUTPUT, QuizType.MCQ)

        assert len(questions) == 2
        first, second = questions
        assert first.type == QuizType.MCQ
        assert first.options == ["Berlin", "Paris", "Rome", "Madrid"]
        assert first.correct_answer == "Paris"
        assert first.difficulty == Difficulty.EASY
        assert second.explanation == ""
        assert second.difficulty == Difficulty.MEDIUM

    def test_bare_array(self):
        text = '[{"question": "Define osmosis.", "correct_answer": "Diffusion of water", "difficulty": "hard"}]'

        questions = parse_quiz_questions(text, QuizType.SAQ)

        assert len(questions) == 1
        assert questions[0].type == QuizType.SAQ
        assert questions[0].options is None
        assert questions[0].difficulty == Difficulty.HARD

    def test_type_is_forced_to_requested_type(self):
        text = '{"questions": [{"type": "mcq", "question": "Explain photosynthesis.", "correct_answer": "..."}]}'

        questions = parse_quiz_questions(text, QuizType.LAQ)

        assert questions[0].type == QuizType.LAQ
        assert questions[0].options is None

    def test_unknown_difficulty_defaults_to_medium(self):
        text = '[{"question": "Q", "correct_answer": "A", "difficulty": "impossible"}]'

        assert parse_quiz_questions(text, QuizType.SAQ)[0].difficulty == Difficulty.MEDIUM

    def test_ids_are_unique(self):
        text = '[{"question": "Q1", "correct_answer": "A"}, {"question": "Q2", "correct_answer": "B"}]'

        first = parse_quiz_questions(text, QuizType.SAQ)
        second = parse_quiz_questions(text, QuizType.SAQ)

        ids = [q.id for q in first + second]
        assert len(set(ids)) == 4
        assert all(re.fullmatch(r"quiz_\d+_\d+_[0-9a-f]{8}", question_id) for question_id in ids)

    @pytest.mark.parametrize(
        "text",
        [
            "Sorry, I cannot create a quiz from this content.",
            '{"questions": "none"}',
            '{"items": []}',
            '["just a string"]',
            "42",
        ],
    )
    def test_unusable_output_raises(self, text):
        """Unparsable output never yields a partial question list."""
        with pytest.raises(GenerationError):
            parse_quiz_questions(text, QuizType.MCQ)


def test_make_question_id_contains_index():
    assert make_question_id(3).split("_")[2] == "3"
