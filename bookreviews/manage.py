"""
Management commands for the reviews table.

Usage:
  # Create the book_reviews table (no-op when it already exists)
  python -m bookreviews.manage install

  # Drop the table and every stored review
  python -m bookreviews.manage uninstall --database-url sqlite:///book_reviews.db
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Settings, configure_logging
from .errors import StorageError
from .reviews.store import ReviewStore


logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m bookreviews.manage",
        description="Provision or remove the book reviews table.",
    )
    parser.add_argument("command", choices=["install", "uninstall"])
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (default: BOOK_REVIEWS_DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    store = ReviewStore.from_url(args.database_url or settings.database_url)

    try:
        if args.command == "install":
            store.install()
            logger.info("Reviews table installed")
        else:
            store.uninstall()
            logger.info("Reviews table removed")
    except StorageError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
