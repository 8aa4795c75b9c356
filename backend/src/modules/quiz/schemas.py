"""Pydantic schemas for quiz generation and grading."""

from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class QuizType(str, Enum):
    """Question formats: multiple choice, short answer, long answer."""

    MCQ = "mcq"
    SAQ = "saq"
    LAQ = "laq"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizQuestion(BaseModel):
    """A generated question. Only multiple choice questions carry options."""

    id: str
    type: QuizType
    question: str
    options: Optional[List[str]] = None
    correct_answer: str
    explanation: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM


class QuizGenerateRequest(BaseModel):
    """Quiz generation parameters. Only the first entry of ``types`` is used."""

    notebook_id: Optional[UUID] = Field(default=None, description="Notebook the documents belong to")
    document_ids: List[UUID] = Field(default_factory=list, description="Documents to draw questions from")
    question_count: int = Field(default=5, ge=1, le=20, description="Number of questions to generate")
    types: List[QuizType] = Field(default_factory=lambda: [QuizType.MCQ], description="Requested question types")


class QuizGenerateResponse(BaseModel):
    success: bool = True
    questions: List[QuizQuestion]


class QuizSubmitRequest(BaseModel):
    """Answers to grade, keyed by question id. Missing answers count as empty."""

    questions: List[QuizQuestion] = Field(default_factory=list)
    user_answers: Dict[str, str] = Field(default_factory=dict)
    notebook_id: Optional[UUID] = Field(default=None, description="Record the attempt in this notebook")
    document_id: Optional[UUID] = Field(default=None, description="Document the quiz was generated from")
    quiz_topic: Optional[str] = Field(default=None, max_length=255)
    record_attempt: bool = Field(default=True, description="Store the summary as a quiz attempt")


class QuizResult(BaseModel):
    is_correct: bool
    explanation: str
    user_answer: str
    correct_answer: str


class QuizSummary(BaseModel):
    total_questions: int
    correct_answers: int
    score: int = Field(description="Rounded percentage of correct answers")


class QuizSubmitResponse(BaseModel):
    success: bool = True
    results: Dict[str, QuizResult]
    summary: QuizSummary
    attempt_id: Optional[UUID] = None
