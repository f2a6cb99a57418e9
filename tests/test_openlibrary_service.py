"""
Unit tests for the Open Library search proxy.

The HTTP layer is mocked: ``_http_get_json`` for the search logic and
``urllib.request.urlopen`` for the HTTP helper itself.
"""

import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from bookreviews.catalog.openlibrary_service import (
    OpenLibrarySearch,
    _http_get_json,
    map_doc,
)
from bookreviews.catalog.schemas import PLACEHOLDER_COVER_URL
from bookreviews.errors import InvalidQuery, UpstreamFormatError, UpstreamUnavailable

from .conftest import DUNE_DOC, make_doc


HTTP_GET = "bookreviews.catalog.openlibrary_service._http_get_json"
URLOPEN = "bookreviews.catalog.openlibrary_service.urllib.request.urlopen"


@pytest.fixture
def search(settings):
    return OpenLibrarySearch(settings)


def _fake_response(body, status=200):
    response = MagicMock()
    response.status = status
    response.read.return_value = body
    return response


def test_map_doc_dune():
    book = map_doc(DUNE_DOC)

    assert book.title == "Dune"
    assert book.author == "Frank Herbert"
    assert book.openlibrary_id == "OL893415W"
    assert book.cover_id == 258027
    assert book.first_publish_year == 1965
    assert book.cover_url == "https://covers.openlibrary.org/b/id/258027-M.jpg"


def test_map_doc_takes_first_author_only():
    book = map_doc(make_doc(1, author_name=["Terry Pratchett", "Neil Gaiman"]))
    assert book.author == "Terry Pratchett"


def test_map_doc_optional_fields_absent():
    book = map_doc({"title": "Untitled Work", "author_name": ["Anon"]})

    assert book.cover_id is None
    assert book.first_publish_year is None
    assert book.openlibrary_id is None
    assert book.cover_url == PLACEHOLDER_COVER_URL


@pytest.mark.parametrize(
    "doc",
    [
        {"title": "Dune", "key": "/works/OL1W"},
        {"title": "Dune", "author_name": []},
        {"title": "Dune", "author_name": [""]},
        {"author_name": ["Frank Herbert"]},
        "not a dict",
    ],
)
def test_map_doc_skips_incomplete_entries(doc):
    assert map_doc(doc) is None


def test_search_maps_and_skips(search):
    docs = [DUNE_DOC, {"title": "No author"}, make_doc(2)]
    with patch(HTTP_GET, return_value={"numFound": 3, "docs": docs}):
        books = search.search("dune")

    assert [book.title for book in books] == ["Dune", "Book 2"]


def test_search_truncates_after_filtering_preserving_order(search):
    docs = [make_doc(i) for i in range(25)]
    docs.insert(3, {"title": "No author"})
    with patch(HTTP_GET, return_value={"docs": docs}):
        books = search.search("book", limit=10)

    assert len(books) == 10
    assert [book.openlibrary_id for book in books] == [f"OL{i}W" for i in range(10)]


def test_search_default_limit_from_settings(search):
    with patch(HTTP_GET, return_value={"docs": [make_doc(i) for i in range(25)]}):
        assert len(search.search("book")) == 10


def test_search_empty_docs_is_not_an_error(search):
    with patch(HTTP_GET, return_value={"numFound": 0, "docs": []}):
        assert search.search("zzzzzz") == []


@pytest.mark.parametrize("query", ["", "  ", "ab", " a "])
def test_search_short_query_never_hits_network(search, query):
    with patch(HTTP_GET) as http_get:
        with pytest.raises(InvalidQuery):
            search.search(query)
    http_get.assert_not_called()


def test_search_builds_encoded_url(search):
    with patch(HTTP_GET, return_value={"docs": []}) as http_get:
        search.search("lord & rings")

    url = http_get.call_args.args[0]
    assert url == "https://openlibrary.test/search.json?q=lord+%26+rings"
    assert http_get.call_args.kwargs == {"timeout": 10.0, "user_agent": "BookReviews/1.0"}


@pytest.mark.parametrize("payload", [{"numFound": 0}, {"docs": "nope"}, [], "docs", None])
def test_search_unexpected_shape(search, payload):
    with patch(HTTP_GET, return_value=payload):
        with pytest.raises(UpstreamFormatError):
            search.search("dune")


def test_search_propagates_upstream_unavailable(search):
    with patch(HTTP_GET, side_effect=UpstreamUnavailable("down")):
        with pytest.raises(UpstreamUnavailable):
            search.search("dune")


def test_http_get_json_decodes_body():
    response = _fake_response(json.dumps({"docs": []}).encode("utf-8"))
    with patch(URLOPEN) as urlopen:
        urlopen.return_value.__enter__.return_value = response
        data = _http_get_json("https://openlibrary.test/search.json?q=dune", 10, "UA/1.0")

    assert data == {"docs": []}
    request = urlopen.call_args.args[0]
    assert request.get_header("User-agent") == "UA/1.0"
    assert request.get_header("Accept") == "application/json"
    assert urlopen.call_args.kwargs["timeout"] == 10


def test_http_get_json_transport_error_keeps_cause():
    error = urllib.error.URLError("connection refused")
    with patch(URLOPEN, side_effect=error):
        with pytest.raises(UpstreamUnavailable) as excinfo:
            _http_get_json("https://openlibrary.test/search.json?q=dune", 10, "UA/1.0")

    assert excinfo.value.cause is error


def test_http_get_json_timeout():
    with patch(URLOPEN, side_effect=TimeoutError("timed out")):
        with pytest.raises(UpstreamUnavailable):
            _http_get_json("https://openlibrary.test/search.json?q=dune", 10, "UA/1.0")


def test_http_get_json_undecodable_body():
    with patch(URLOPEN) as urlopen:
        urlopen.return_value.__enter__.return_value = _fake_response(b"<html>busy</html>")
        with pytest.raises(UpstreamUnavailable) as excinfo:
            _http_get_json("https://openlibrary.test/search.json?q=dune", 10, "UA/1.0")

    assert isinstance(excinfo.value.cause, ValueError)


def test_http_get_json_unexpected_status():
    with patch(URLOPEN) as urlopen:
        urlopen.return_value.__enter__.return_value = _fake_response(b"", status=204)
        with pytest.raises(UpstreamUnavailable):
            _http_get_json("https://openlibrary.test/search.json?q=dune", 10, "UA/1.0")
