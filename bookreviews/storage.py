# bookreviews/storage.py
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Engine,
    Integer,
    String,
    Text,
    create_engine,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool


TABLE_NAME = "book_reviews"


class Base(DeclarativeBase):
    pass


class ReviewRecord(Base):
    """Row of the ``book_reviews`` table.

    Rows are append-only: the service inserts and selects, nothing
    updates or deletes them.
    """

    __tablename__ = TABLE_NAME

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_title: Mapped[str] = mapped_column(String(255), nullable=False)
    reviewer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    review_text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-5 star rating")
    review_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    book_openlibrary_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_book_reviews_rating_range"),
        # Keeps SQLite from handing out the id of a removed last row again.
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<ReviewRecord(id={self.id}, book_title={self.book_title!r}, rating={self.rating})>"


def make_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url``.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory database has to live on a single connection or every
    session would see its own empty database.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)
