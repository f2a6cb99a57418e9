"""
Route definitions for submitting and listing reviews.

Endpoints under /api/reviews:
- GET  /nonce  : issue an anti-forgery token for the review pages
- POST /submit : validate and store a new review
- POST /list   : all reviews, newest first
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from ..models import Envelope, NonceRequest, SubmitReviewRequest, ok
from ..sanitize import validate_review
from ..security import NonceManager
from .store import ReviewStore


SUBMITTED_MESSAGE = "Review submitted successfully!"

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


def get_store(request: Request) -> ReviewStore:
    return request.app.state.store


def get_nonces(request: Request) -> NonceManager:
    return request.app.state.nonces


@router.get("/nonce", response_model=Envelope)
def issue_nonce(nonces: NonceManager = Depends(get_nonces)) -> Envelope:
    """Token the page embeds and echoes back with every operation."""
    return ok({"nonce": nonces.create()})


@router.post("/submit", response_model=Envelope)
def submit_review(
    req: SubmitReviewRequest,
    store: ReviewStore = Depends(get_store),
    nonces: NonceManager = Depends(get_nonces),
) -> Envelope:
    nonces.check(req.nonce)
    draft = validate_review(req)
    review_id = store.create(draft)
    return ok({"message": SUBMITTED_MESSAGE, "id": review_id})


@router.post("/list", response_model=Envelope)
def list_reviews(
    req: Optional[NonceRequest] = Body(default=None),
    store: ReviewStore = Depends(get_store),
    nonces: NonceManager = Depends(get_nonces),
) -> Envelope:
    """All reviews, newest first. No reviews yet is an empty list, not an error."""
    nonces.check(req.nonce if req is not None else None)
    return ok(store.list_all())
