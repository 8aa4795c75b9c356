"""CRUD operations for quiz attempts using FastCRUD."""

from fastcrud import FastCRUD

from .models import QuizAttempt

quiz_attempt_crud: FastCRUD = FastCRUD(QuizAttempt)
