"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to. Route handlers catch
them and turn them into HTTPException, so services never import FastAPI.
"""


class TodoAppError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TodoAppError):
    """A required field is missing or empty."""

    status_code = 400


class ConflictError(TodoAppError):
    """An identity with this email already exists."""

    status_code = 400


class AuthenticationError(TodoAppError):
    """Login failed. Never says which of email/password was wrong."""

    status_code = 400


class InvalidTokenError(TodoAppError):
    """Bearer token is malformed, expired, or signed with another secret."""

    status_code = 403


class NotFoundError(TodoAppError):
    """Task does not exist, or exists but belongs to someone else."""

    status_code = 404
