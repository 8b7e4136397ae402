"""
Catalog package for the bookstore API.

This package holds everything behind the ``/api/books`` endpoints:
form normalisation, cover image storage, the two interchangeable book
stores (a JSON file and a SQL database) and the ``BookService`` that
ties them together. The FastAPI router at the end of the chain only
extracts request fields and delegates to the service.
"""

from .router import router as catalog_router  # noqa: F401
