# bookreviews/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .catalog import catalog_router
from .catalog.openlibrary_service import OpenLibrarySearch
from .config import Settings, configure_logging
from .errors import BookReviewsError, SecurityCheckFailed, ValidationFailed
from .models import fail
from .reviews.router import router as reviews_router
from .reviews.store import ReviewStore
from .security import NonceManager


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store.install()
    yield


async def handle_book_reviews_error(request: Request, exc: BookReviewsError) -> JSONResponse:
    if exc.status_code >= 500:
        cause = getattr(exc, "cause", None)
        logger.error("%s on %s: %s (cause: %r)", exc.code, request.url.path, exc.message, cause)
    else:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
    envelope = fail(exc.message, exc.code)
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed bodies; a missing or invalid nonce in the raw body wins.

    Body validation runs before the route handler checks the nonce, so
    the check is repeated here on the unvalidated payload.
    """
    body = getattr(exc, "body", None)
    nonce = body.get("nonce") if isinstance(body, dict) else None
    if not request.app.state.nonces.verify(nonce):
        return await handle_book_reviews_error(request, SecurityCheckFailed())
    logger.warning("Malformed request body on %s: %s", request.url.path, exc.errors())
    envelope = fail("Invalid request payload.", ValidationFailed.__name__)
    return JSONResponse(status_code=422, content=envelope.model_dump())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    Serve with ``uvicorn --factory bookreviews.main:create_app``; settings
    then come from the environment and ``BOOK_REVIEWS_NONCE_SECRET`` must
    be set.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Book Reviews",
        description=(
            "Search the Open Library catalogue, submit star ratings and "
            "reviews for books, and list the reviews submitted so far."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = ReviewStore.from_url(settings.database_url)
    app.state.catalog = OpenLibrarySearch(settings)
    app.state.nonces = NonceManager(
        settings.resolved_nonce_secret(),
        lifetime=settings.nonce_lifetime,
        action=settings.nonce_action,
    )

    app.add_exception_handler(BookReviewsError, handle_book_reviews_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Book reviews service is running"}

    app.include_router(catalog_router)
    app.include_router(reviews_router)
    return app

