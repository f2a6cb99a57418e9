"""
Reviews package for submitting and listing book reviews.

This package contains the review schemas, the SQL-backed ``ReviewStore``
and the routes exposing the submit and list operations. Reviews are
append-only: there is no endpoint to edit or delete them.
"""
