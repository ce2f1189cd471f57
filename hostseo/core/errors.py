"""Exceptions raised by the generation and publishing layers."""


class GenerationError(Exception):
    """Base exception for a failed article generation attempt."""


class ConfigError(GenerationError):
    """Raised when the generation service credential is missing."""


class TransportError(GenerationError):
    """Raised when the generation request could not complete."""


class ServiceError(GenerationError):
    """Raised when the generation service answers with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Generation service returned HTTP {status_code}: {body}")


class EmptyResponseError(GenerationError):
    """Raised when the generation service succeeds but returns no text."""


class RepositoryError(Exception):
    """Base exception for content repository failures."""

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class AuthenticationError(RepositoryError):
    """Raised on 401/403 responses."""


class NotFoundError(RepositoryError):
    """Raised on 404 responses."""
