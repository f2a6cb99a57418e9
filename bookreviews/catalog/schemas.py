"""
Pydantic schema definitions for the catalog module.

The ``CatalogBook`` model captures the minimal fields the front-end
needs to render a search result card and to pre-fill the review form:
title, first author, publication year and the Open Library work id.
Books are built fresh from every search response and never stored.
"""

from typing import Optional

from pydantic import BaseModel, computed_field


COVER_URL_PATTERN = "https://covers.openlibrary.org/b/id/{cover_id}-M.jpg"
PLACEHOLDER_COVER_URL = "https://placehold.co/128x193/cccccc/333333?text=No+Cover"


def build_cover_url(cover_id: Optional[int]) -> str:
    """Medium-size cover image URL, or a placeholder image when unknown."""
    if cover_id:
        return COVER_URL_PATTERN.format(cover_id=cover_id)
    return PLACEHOLDER_COVER_URL


class CatalogBook(BaseModel):
    """A single search result.

    ``author`` holds only the first listed author. ``cover_id`` is the
    raw Open Library cover identifier; ``cover_url`` is derived from it
    for convenience. ``openlibrary_id`` is the work id without its
    ``/works/`` prefix (e.g. ``OL893415W``) and is what the review form
    sends back as ``book_openlibrary_id``.
    """

    title: str
    author: str
    first_publish_year: Optional[int] = None
    cover_id: Optional[int] = None
    openlibrary_id: Optional[str] = None

    @computed_field
    @property
    def cover_url(self) -> str:
        return build_cover_url(self.cover_id)
