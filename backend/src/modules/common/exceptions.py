"""Domain exception classes for business logic errors."""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found or is not owned by the caller."""

    pass


class ValidationError(DomainError):
    """Raised when required input is missing or invalid."""

    pass


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or invalid."""

    pass


class GenerationError(DomainError):
    """Raised when the generative model output cannot be used."""

    pass


class NotebookNotFoundError(ResourceNotFoundError):
    """Raised when a notebook cannot be found."""

    pass


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when a document cannot be found."""

    pass


class ChatSessionNotFoundError(ResourceNotFoundError):
    """Raised when a chat session cannot be found."""

    pass


class NoDocumentContentError(ResourceNotFoundError):
    """Raised when none of the requested documents has any text content."""

    pass
