# bookreviews/models.py
from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from typing_extensions import Literal


ErrorCode = Literal[
    "SecurityCheckFailed",
    "InvalidQuery",
    "UpstreamUnavailable",
    "UpstreamFormatError",
    "ValidationFailed",
    "StorageError",
]


class Envelope(BaseModel):
    success: bool
    data: Any = None


class ErrorPayload(BaseModel):
    message: str
    code: ErrorCode


class NonceRequest(BaseModel):
    nonce: Optional[str] = None


class SearchRequest(NonceRequest):
    query: Optional[str] = None


class SubmitReviewRequest(NonceRequest):
    book_title: Optional[str] = None
    reviewer_name: Optional[str] = None
    review_text: Optional[str] = None
    # Raw value as sent by the form; parsed by sanitize.parse_rating.
    rating: Optional[Union[int, float, str]] = None
    book_openlibrary_id: Optional[str] = Field(
        default=None,
        description="Open Library work id of the reviewed book (e.g. OL893415W).",
    )


def ok(data: Any = None) -> Envelope:
    return Envelope(success=True, data=data)


def fail(message: str, code: ErrorCode) -> Envelope:
    return Envelope(success=False, data=ErrorPayload(message=message, code=code))
