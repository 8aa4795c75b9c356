"""Common constants used across the application."""

from typing import Callable, Dict, Type

from fastapi import HTTPException, status

from .exceptions import (
    AuthenticationError,
    DomainError,
    GenerationError,
    ResourceNotFoundError,
    ValidationError,
)

EXCEPTION_MAPPING: Dict[Type[DomainError], Callable[[str], HTTPException]] = {
    ResourceNotFoundError: lambda message: HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message),
    ValidationError: lambda message: HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message),
    AuthenticationError: lambda message: HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail=message, headers={"WWW-Authenticate": "Bearer"}
    ),
    GenerationError: lambda message: HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message),
}

NO_CONTEXT_ANSWER = (
    "I'm sorry, I couldn't find any relevant information in the selected documents to answer your question."
)
