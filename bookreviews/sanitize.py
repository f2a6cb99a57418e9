"""
Input sanitization and validation.

The helpers here turn raw request values into clean strings and a
validated ``ReviewDraft``. ``sanitize_text_field`` is meant for
single-line inputs (titles, names, ids, search queries) and collapses
all whitespace, while ``sanitize_textarea_field`` keeps line breaks
for the free-text review body. Both strip markup and control
characters. Nothing in this module touches the network or the
database.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .errors import InvalidQuery, ValidationFailed
from .models import SubmitReviewRequest
from .reviews.schemas import ReviewDraft


MIN_QUERY_LENGTH = 3
MIN_RATING = 1
MAX_RATING = 5

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_OCTET_RE = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_INTEGER_RE = re.compile(r"[+-]?\d+")


def _sanitize(value: Any, keep_newlines: bool) -> str:
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_RE.sub("", text)
    if not keep_newlines:
        text = _WHITESPACE_RE.sub(" ", text)
    # Removing one octet can expose another ("%%4141"), so loop.
    found = False
    while _OCTET_RE.search(text):
        text = _OCTET_RE.sub("", text)
        found = True
    if found:
        text = re.sub(r" +", " ", text)
    return text.strip()


def sanitize_text_field(value: Any) -> str:
    return _sanitize(value, keep_newlines=False)


def sanitize_textarea_field(value: Any) -> str:
    return _sanitize(value, keep_newlines=True)


def validate_query(raw: Any) -> str:
    """Return the sanitized search query or raise ``InvalidQuery``."""
    query = sanitize_text_field(raw)
    if not query:
        raise InvalidQuery("Search query is empty.")
    if len(query) < MIN_QUERY_LENGTH:
        raise InvalidQuery(f"Search query must be at least {MIN_QUERY_LENGTH} characters.")
    return query


def parse_rating(raw: Any) -> int:
    """Parse a star rating, accepting ints, integral floats and digit strings."""
    rating: Optional[int] = None
    if isinstance(raw, bool):
        rating = None
    elif isinstance(raw, int):
        rating = raw
    elif isinstance(raw, float):
        if raw.is_integer():
            rating = int(raw)
    elif isinstance(raw, str):
        stripped = raw.strip()
        if _INTEGER_RE.fullmatch(stripped):
            rating = int(stripped)
    if rating is None:
        raise ValidationFailed("Rating must be a whole number.", field="rating")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailed(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}.", field="rating"
        )
    return rating


def validate_review(request: SubmitReviewRequest) -> ReviewDraft:
    """Validate a submission and return the sanitized draft to persist.

    Raises
    ------
    ValidationFailed
        When a required field is absent, empty after sanitization, or
        the rating is not an integer in [1, 5].
    """
    required = ("book_title", "reviewer_name", "review_text", "rating")
    if any(getattr(request, name) is None for name in required):
        raise ValidationFailed("Missing required fields for review submission.")

    book_title = sanitize_text_field(request.book_title)
    reviewer_name = sanitize_text_field(request.reviewer_name)
    review_text = sanitize_textarea_field(request.review_text)
    for name, value in (
        ("book_title", book_title),
        ("reviewer_name", reviewer_name),
        ("review_text", review_text),
    ):
        if not value:
            raise ValidationFailed(f"Field '{name}' must not be empty.", field=name)

    rating = parse_rating(request.rating)
    openlibrary_id = sanitize_text_field(request.book_openlibrary_id) or None

    return ReviewDraft(
        book_title=book_title,
        reviewer_name=reviewer_name,
        review_text=review_text,
        rating=rating,
        book_openlibrary_id=openlibrary_id,
    )
