"""
Catalog package for the book search.

This package contains the schemas, the Open Library search proxy and
the route definition that let a front-end (for example the review
page of a CMS) look up a book before reviewing it. Results carry the
title, first author, publication year, cover id and Open Library work
id of each book.
"""

from .router import router as catalog_router  # noqa: F401
