"""
Persistence for book reviews.

``ReviewStore`` wraps the ``book_reviews`` table. It offers exactly two
data operations, ``create`` and ``list_all``, plus ``install`` and
``uninstall`` to provision and drop the table. Any database failure is
raised as ``StorageError`` with the original exception attached, so
callers never have to inspect connection state after a write.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StorageError
from ..storage import Base, ReviewRecord, make_engine
from .schemas import Review, ReviewDraft


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # Stored naive; SQLite drops timezone information anyway.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ReviewStore:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = _utcnow) -> None:
        self.engine = engine
        self._clock = clock

    @classmethod
    def from_url(cls, database_url: str) -> "ReviewStore":
        return cls(make_engine(database_url))

    def install(self) -> None:
        """Create the reviews table if it does not exist yet."""
        try:
            Base.metadata.create_all(self.engine, tables=[ReviewRecord.__table__])
        except SQLAlchemyError as exc:
            logger.error("Failed to create reviews table: %s", exc)
            raise StorageError("Failed to create the reviews table.", cause=exc) from exc

    def uninstall(self) -> None:
        """Drop the reviews table and every review in it."""
        try:
            ReviewRecord.__table__.drop(self.engine, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.error("Failed to drop reviews table: %s", exc)
            raise StorageError("Failed to drop the reviews table.", cause=exc) from exc

    def create(self, draft: ReviewDraft) -> int:
        """Insert ``draft`` as a new review and return its id.

        The insert runs in its own transaction: on failure it is rolled
        back and ``StorageError`` is raised.
        """
        record = ReviewRecord(
            book_title=draft.book_title,
            reviewer_name=draft.reviewer_name,
            review_text=draft.review_text,
            rating=draft.rating,
            book_openlibrary_id=draft.book_openlibrary_id,
            review_date=self._clock(),
        )
        try:
            with Session(self.engine) as session, session.begin():
                session.add(record)
                session.flush()
                review_id = record.id
        except SQLAlchemyError as exc:
            logger.error("Failed to insert review for %r: %s", draft.book_title, exc)
            raise StorageError(f"Failed to submit review. Database error: {exc}", cause=exc) from exc
        logger.info("Stored review %s for %r", review_id, draft.book_title)
        return review_id

    def list_all(self) -> List[Review]:
        """Return every review, newest first (ties: highest id first)."""
        stmt = select(ReviewRecord).order_by(
            ReviewRecord.review_date.desc(), ReviewRecord.id.desc()
        )
        try:
            with Session(self.engine) as session:
                records = session.scalars(stmt).all()
                return [Review.model_validate(record) for record in records]
        except SQLAlchemyError as exc:
            logger.error("Failed to load reviews: %s", exc)
            raise StorageError(f"Failed to load reviews. Database error: {exc}", cause=exc) from exc
