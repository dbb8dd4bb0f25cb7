"""Domain exceptions for CineQuiz.

Each exception maps to an HTTP status and a machine-readable error code. The
API layer renders them as ``{"error": code, "message": ...}`` payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class CineQuizError(Exception):
    """Base class for errors that are reported to API callers."""

    status_code: int = 400
    code: str = "error"
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body describing this error."""
        return {"error": self.code, "message": self.message}


class ValidationFailed(CineQuizError):
    """Raised when caller-supplied input has an invalid format."""

    status_code = 400
    code = "validation_error"


class InvalidAddress(ValidationFailed):
    code = "invalid_address"
    default_message = "Wallet address must be 32 to 44 base58 characters"


class InvalidEmail(ValidationFailed):
    code = "invalid_email"
    default_message = "Email address is not valid"


class MissingAddress(ValidationFailed):
    code = "missing_address"
    default_message = "A wallet address is required"


class InvalidTitle(ValidationFailed):
    code = "invalid_title"
    default_message = "Movie title must not be empty"


class Conflict(CineQuizError):
    """Raised when a registration collides with an existing record."""

    status_code = 400
    code = "conflict"


class DuplicateRegistration(Conflict):
    code = "duplicate_registration"
    default_message = "This email is already registered to another wallet"


class InvalidOrExpiredToken(CineQuizError):
    status_code = 400
    code = "invalid_or_expired_token"
    default_message = "Invalid or expired verification link."


class AttemptNotRecorded(CineQuizError):
    """Raised when a contended counter could not be updated."""

    status_code = 503
    code = "attempt_not_recorded"
    default_message = "Attempt could not be recorded, please retry"


class RateLimited(CineQuizError):
    """Raised when an identity exceeds an attempt or submission budget."""

    status_code = 429
    code = "rate_limited"

    def __init__(
        self,
        message: str | None = None,
        *,
        reset_at: datetime | None = None,
        now: datetime | None = None,
    ) -> None:
        super().__init__(message)
        self.reset_at = reset_at
        self.retry_after = self.retry_after_seconds(now) if now is not None else None

    def retry_after_seconds(self, now: datetime) -> int:
        """Return the number of whole seconds until the limit resets."""
        if self.reset_at is None:
            return 0
        return max(0, int((self.reset_at - now).total_seconds() + 0.999))

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.reset_at is not None:
            payload["resetAt"] = self.reset_at.isoformat()
        return payload


class TooManyAttempts(RateLimited):
    code = "too_many_attempts"
    default_message = "Too many attempts. Please wait a minute before trying again."


class AlreadyParticipated(RateLimited):
    code = "already_participated"
    default_message = "You can only submit your information once per day."


class NotFound(CineQuizError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class EmptyCatalog(NotFound):
    code = "empty_catalog"
    default_message = "No movie found"


class UserNotFound(NotFound):
    code = "user_not_found"
    default_message = "User not found"
