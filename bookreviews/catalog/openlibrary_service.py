"""
Open Library search proxy for the review form.

``OpenLibrarySearch.search()`` forwards a visitor's query to the Open
Library search endpoint and maps the ``docs`` of the response into
``CatalogBook`` instances. Only the Python standard library is used for
the HTTP request. Unlike a browsing catalogue this proxy is strict
about failures: an unreachable or garbled upstream raises
``UpstreamUnavailable`` and an unexpected response shape raises
``UpstreamFormatError``, so the caller can tell "no results" apart from
"no answer".

No cache and no retry: every search is a single fresh request bounded
by the configured timeout.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, Iterable, List, Optional

from ..config import Settings
from ..errors import UpstreamFormatError, UpstreamUnavailable
from ..sanitize import validate_query
from .schemas import CatalogBook


logger = logging.getLogger(__name__)

WORK_KEY_PREFIX = "/works/"


def _http_get_json(url: str, timeout: float, user_agent: str) -> Any:
    """Perform an HTTP GET and return the decoded JSON body.

    Raises ``UpstreamUnavailable`` on network errors, on a non-200
    status and when the body is not valid JSON.
    """
    request = urllib.request.Request(
        url,
        headers={
            'User-Agent': user_agent,
            'Accept': 'application/json',
        },
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                logger.warning(
                    "Open Library request to %s returned status %s", url, response.status
                )
                raise UpstreamUnavailable(
                    f"Open Library returned HTTP status {response.status}."
                )
            body = response.read().decode('utf-8', errors='replace')
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise UpstreamUnavailable(
            f"Failed to connect to Open Library API: {exc}", cause=exc
        ) from exc
    try:
        return json.loads(body)
    except ValueError as exc:
        logger.error("Undecodable response from %s: %s", url, exc)
        raise UpstreamUnavailable(
            "Open Library API returned an unreadable response.", cause=exc
        ) from exc


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _work_id(key: Any) -> Optional[str]:
    if not isinstance(key, str) or not key:
        return None
    if key.startswith(WORK_KEY_PREFIX):
        key = key[len(WORK_KEY_PREFIX):]
    return key or None


def map_doc(doc: Any) -> Optional[CatalogBook]:
    """Map one entry of the ``docs`` list, or return ``None`` to skip it.

    Entries need a title and at least one author name; everything else
    is optional.
    """
    if not isinstance(doc, dict):
        return None
    title = doc.get('title')
    authors = doc.get('author_name')
    if not isinstance(title, str) or not title.strip():
        return None
    if not isinstance(authors, list) or not authors:
        return None
    first_author = authors[0]
    if not isinstance(first_author, str) or not first_author.strip():
        return None
    return CatalogBook(
        title=title,
        author=first_author,
        first_publish_year=_optional_int(doc.get('first_publish_year')),
        cover_id=_optional_int(doc.get('cover_i')),
        openlibrary_id=_work_id(doc.get('key')),
    )


def map_docs(docs: Iterable[Any], limit: int) -> List[CatalogBook]:
    """Map ``docs`` in order, skipping incomplete entries, up to ``limit`` books."""
    books: List[CatalogBook] = []
    if limit <= 0:
        return books
    for doc in docs:
        book = map_doc(doc)
        if book is None:
            continue
        books.append(book)
        if len(books) >= limit:
            break
    return books


class OpenLibrarySearch:
    """Search proxy configured from ``Settings``."""

    def __init__(self, settings: Settings) -> None:
        self.search_url = settings.search_url
        self.timeout = settings.search_timeout
        self.user_agent = settings.user_agent
        self.default_limit = settings.search_limit

    def build_url(self, query: str) -> str:
        params: Dict[str, str] = {'q': query}
        return f"{self.search_url}?{urllib.parse.urlencode(params)}"

    def search(self, query: Any, limit: Optional[int] = None) -> List[CatalogBook]:
        """Search Open Library for ``query``.

        The query is validated before anything goes over the network.
        At most ``limit`` books are returned (default from settings),
        in the order Open Library ranked them.
        """
        clean_query = validate_query(query)
        limit = self.default_limit if limit is None else limit
        url = self.build_url(clean_query)
        data = _http_get_json(url, timeout=self.timeout, user_agent=self.user_agent)
        if not isinstance(data, dict) or not isinstance(data.get('docs'), list):
            logger.warning("Unexpected Open Library response shape from %s", url)
            raise UpstreamFormatError("No books found or invalid API response format.")
        books = map_docs(data['docs'], limit)
        logger.info(
            "Open Library search %r: %d docs, %d books returned",
            clean_query, len(data['docs']), len(books),
        )
        return books
