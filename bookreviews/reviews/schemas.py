"""
Pydantic schema definitions for reviews.

``ReviewDraft`` is what the validator hands to the store: every text
field is already sanitized and the rating is a checked integer.
``Review`` is a stored row as returned to clients, with the ``id`` and
``review_date`` assigned by the server.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewDraft(BaseModel):
    book_title: str = Field(..., min_length=1)
    reviewer_name: str = Field(..., min_length=1)
    review_text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    book_openlibrary_id: Optional[str] = None


class Review(BaseModel):
    """A persisted review."""

    id: int
    book_title: str
    reviewer_name: str
    review_text: str
    rating: int
    book_openlibrary_id: Optional[str] = None
    review_date: datetime

    model_config = ConfigDict(from_attributes=True)
