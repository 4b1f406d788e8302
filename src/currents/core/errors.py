"""Error taxonomy shared by the repository, service and API layers.

Every failure raised by the post lifecycle carries a kind (the class), an
HTTP status for the API layer, and a message safe to show to users.
"""
from __future__ import annotations

from typing import Any

__all__ = [
    "ConflictError",
    "CurrentsError",
    "FieldError",
    "NotFoundError",
    "UnauthorizedError",
    "UnavailableError",
    "ValidationError",
]

FieldError = dict[str, str]


class CurrentsError(Exception):
    """Base exception for all Currents domain failures."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body rendered for this error."""
        return {"error": self.public_message}


class ValidationError(CurrentsError):
    """Malformed input; always raised before any mutation."""

    status_code = 400
    public_message = "Invalid request data"

    def __init__(
        self,
        errors: list[FieldError],
        message: str | None = None,
    ) -> None:
        self.errors = errors
        summary = message or "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(summary or self.public_message)
        if message is not None:
            self.public_message = message

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        """Build an error for a single offending field."""
        return cls([{"field": field, "message": message}])

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.public_message, "details": self.errors}


class NotFoundError(CurrentsError):
    """Referenced post or author does not exist."""

    status_code = 404
    public_message = "Not found"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)
        if message is not None:
            self.public_message = message


class ConflictError(CurrentsError):
    """A concurrent write invalidated an expected precondition.

    The caller may retry the whole operation; nothing is retried here.
    """

    status_code = 409
    public_message = "The post was changed by another request. Please try again."


class UnavailableError(CurrentsError):
    """The store did not respond in time or refused the connection."""

    status_code = 503
    public_message = "Service temporarily unavailable. Please try again."


class UnauthorizedError(CurrentsError):
    """Write attempted without a verified author, or on another author's post."""

    status_code = 403
    public_message = "You are not allowed to modify this post"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if message is not None:
            self.public_message = message
        if status_code is not None:
            self.status_code = status_code
