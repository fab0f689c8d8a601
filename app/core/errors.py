"""Typed errors raised by the session and review workflow core."""

from fastapi import status


class AppError(Exception):
    """Base error carrying a stable kind and the HTTP status it maps to."""

    kind = "app_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Application error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "detail": self.message}


class AuthError(AppError):
    """Session verification failed; the caller is unauthenticated."""

    kind = "auth_error"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class InvalidToken(AuthError):
    kind = "invalid_token"
    default_message = "Invalid token"


class TokenExpired(AuthError):
    kind = "token_expired"
    default_message = "Token has expired"


class WorkflowError(AppError):
    """A requested status transition was rejected without side effects."""

    kind = "workflow_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Status change rejected"


class InvalidStatus(WorkflowError):
    kind = "invalid_status"
    default_message = "Invalid resume status"


class MissingReason(WorkflowError):
    kind = "missing_reason"
    default_message = "A reason is required to change resume status"


class ResumeNotFound(WorkflowError):
    kind = "resume_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resume not found"


class PersistenceUnavailable(AppError):
    """The database failed underneath an operation. Callers may retry."""

    kind = "persistence_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Persistence layer unavailable"
