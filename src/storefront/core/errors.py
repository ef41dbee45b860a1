"""Application error types.

Every failure a handler can report is an ``AppError`` carrying a
human-readable message and the HTTP status it maps to. The HTTP layer
renders them uniformly as ``{"success": false, "message": ...}``.
"""


class AppError(Exception):
    """Base error carrying a message and an HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code})"


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    """A uniqueness rule was violated (duplicate e-mail, duplicate address type)."""

    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ExternalServiceError(AppError):
    """The image host or mail provider failed."""

    status_code = 502
