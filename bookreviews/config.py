"""
Configuration loader.

Reads settings from the environment (and a ``.env`` file when present)
into a ``Settings`` value. The application factory receives this value
explicitly, so nothing here is read again after start-up.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DAY_IN_SECONDS = 24 * 60 * 60


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the book reviews service.

    ``nonce_secret`` signs anti-forgery tokens and is required to build
    the application.
    """

    database_url: str = "sqlite:///book_reviews.db"
    search_url: str = "https://openlibrary.org/search.json"
    search_timeout: float = 10.0
    search_limit: int = 10
    user_agent: str = "BookReviews/1.0"
    nonce_secret: str = field(default="", repr=False)
    nonce_lifetime: int = DAY_IN_SECONDS
    nonce_action: str = "book_reviews"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(dotenv_path=env_file)
        return cls(
            database_url=os.getenv("BOOK_REVIEWS_DATABASE_URL", cls.database_url),
            search_url=os.getenv("BOOK_REVIEWS_SEARCH_URL", cls.search_url),
            search_timeout=_env_float("BOOK_REVIEWS_SEARCH_TIMEOUT", cls.search_timeout),
            search_limit=_env_int("BOOK_REVIEWS_SEARCH_LIMIT", cls.search_limit),
            user_agent=os.getenv("BOOK_REVIEWS_USER_AGENT", cls.user_agent),
            nonce_secret=os.getenv("BOOK_REVIEWS_NONCE_SECRET", ""),
            nonce_lifetime=_env_int("BOOK_REVIEWS_NONCE_LIFETIME", cls.nonce_lifetime),
            log_level=os.getenv("BOOK_REVIEWS_LOG_LEVEL", cls.log_level),
        )

    def resolved_nonce_secret(self) -> str:
        """The token-signing secret; every worker must share the same one."""
        if not self.nonce_secret:
            raise ValueError(
                "BOOK_REVIEWS_NONCE_SECRET is not set. All workers must share one "
                "secret or tokens issued by one worker are rejected by the others."
            )
        return self.nonce_secret


def configure_logging(log_level: str = "INFO") -> None:
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
