from __future__ import annotations

from typing import Any


class AppError(Exception):
    """
    Base for failures that map onto an HTTP response.

    Handlers in app.main turn these into ErrorResponse bodies; services raise
    them and never build responses themselves.
    """

    status_code = 500
    code = "internal"

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"


class Conflict(AppError):
    status_code = 409
    code = "conflict"


class AlreadyBookmarked(Conflict):
    code = "already_bookmarked"


class AlreadyReported(Conflict):
    code = "already_reported"


class AlreadyInState(Conflict):
    code = "already_in_state"


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_error"


class Internal(AppError):
    status_code = 500
    code = "internal"
