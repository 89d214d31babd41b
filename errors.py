"""Application error types.

Every error carries the HTTP status the API layer answers with. Messages are
user-facing and returned verbatim in the ``{"error": ...}`` body.
"""


class AppError(Exception):
    """Base class for errors that end a request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(AppError):
    """Missing user identity or bad credentials."""

    status_code = 401


class MethodNotAllowed(AppError):
    status_code = 405


class NotFoundOrForbidden(AppError):
    """The record does not exist or belongs to another user.

    The two cases are intentionally indistinguishable.
    """

    status_code = 400


class PersistenceError(AppError):
    """A database operation failed."""

    status_code = 400


class AggregationError(AppError):
    """Statistics could not be computed."""

    status_code = 400


class NotFoundError(AppError):
    status_code = 404
