"""
Route definitions for the catalogue search.

Endpoints under /api/catalog:
- POST /search : search Open Library for books to review
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..models import Envelope, SearchRequest, ok
from ..security import NonceManager
from .openlibrary_service import OpenLibrarySearch


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_catalog(request: Request) -> OpenLibrarySearch:
    return request.app.state.catalog


def get_nonces(request: Request) -> NonceManager:
    return request.app.state.nonces


@router.post("/search", response_model=Envelope)
def search_books(
    req: SearchRequest,
    catalog: OpenLibrarySearch = Depends(get_catalog),
    nonces: NonceManager = Depends(get_nonces),
) -> Envelope:
    """
    Returns up to ``search_limit`` books matching ``query``.

    The nonce is checked before the query is even looked at, so a
    forged request never reaches Open Library. An empty list is a
    successful answer; upstream problems come back as failure envelopes
    through the application's exception handler.
    """
    nonces.check(req.nonce)
    books = catalog.search(req.query)
    return ok(books)
