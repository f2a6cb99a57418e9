"""
Error kinds raised by the book reviews components.

Every error carries a user-facing ``message``, a stable ``code`` (the
class name) and the HTTP status the dispatcher answers with. None of
them is fatal: the exception handler in ``main`` turns each one into a
failure envelope.
"""

from __future__ import annotations

from typing import Optional


class BookReviewsError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__


class SecurityCheckFailed(BookReviewsError):
    status_code = 403

    def __init__(self, message: str = "Security check failed.") -> None:
        super().__init__(message)


class InvalidQuery(BookReviewsError):
    status_code = 400


class UpstreamUnavailable(BookReviewsError):
    """The catalog could not be reached or answered with an unreadable body."""

    status_code = 502

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class UpstreamFormatError(BookReviewsError):
    status_code = 502


class ValidationFailed(BookReviewsError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class StorageError(BookReviewsError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
