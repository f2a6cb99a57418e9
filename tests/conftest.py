"""Shared fixtures: an in-memory app, a test client and sample Open Library docs."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from bookreviews.config import Settings
from bookreviews.main import create_app
from bookreviews.reviews.store import ReviewStore
from bookreviews.storage import make_engine


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        search_url="https://openlibrary.test/search.json",
        nonce_secret="test-secret",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def nonce(app):
    return app.state.nonces.create()


@pytest.fixture
def store():
    review_store = ReviewStore(make_engine("sqlite://"))
    review_store.install()
    return review_store


@pytest.fixture
def ticking_clock():
    """Clock that advances one minute per call, starting 2024-06-01 12:00."""
    state = {"now": datetime(2024, 6, 1, 12, 0, 0)}

    def clock():
        current = state["now"]
        state["now"] = current + timedelta(minutes=1)
        return current

    return clock


def make_doc(index, **overrides):
    doc = {
        "key": f"/works/OL{index}W",
        "title": f"Book {index}",
        "author_name": [f"Author {index}", "Second Author"],
        "first_publish_year": 1900 + index,
        "cover_i": 1000 + index,
    }
    doc.update(overrides)
    return doc


DUNE_DOC = {
    "key": "/works/OL893415W",
    "title": "Dune",
    "author_name": ["Frank Herbert"],
    "first_publish_year": 1965,
    "cover_i": 258027,
}
