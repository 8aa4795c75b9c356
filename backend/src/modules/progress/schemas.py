"""Pydantic schemas for quiz attempts and progress statistics."""

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..common.schemas import TimestampSchema
from ..quiz.schemas import QuizType


class QuizAttemptCreate(BaseModel):
    notebook_id: UUID
    document_id: Optional[UUID] = None
    quiz_topic: str = Field(min_length=1, max_length=255)
    quiz_type: QuizType
    score: int = Field(ge=0, le=100)
    total_questions: int = Field(ge=1)
    correct_answers: int = Field(ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "QuizAttemptCreate":
        if self.correct_answers > self.total_questions:
            raise ValueError("correct_answers cannot exceed total_questions")
        return self


class QuizAttemptRead(TimestampSchema):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    notebook_id: UUID
    document_id: Optional[UUID] = None
    quiz_topic: str
    quiz_type: QuizType
    score: int
    total_questions: int
    correct_answers: int


class ProgressStatistics(BaseModel):
    """Aggregates over a list of attempts."""

    total_attempts: int = 0
    average_score: int = 0
    total_correct_answers: int = 0
    total_questions: int = 0
    quiz_type_breakdown: Dict[str, int] = Field(default_factory=dict)
    recent_activity: List[QuizAttemptRead] = Field(default_factory=list)


class ProgressResponse(BaseModel):
    success: bool = True
    attempts: List[QuizAttemptRead]
    statistics: ProgressStatistics
