"""
Exceptions raised by the catalogue service layer.

The HTTP router translates these into status codes: validation errors
become 400, unknown identifiers 404 and storage faults 500. Cover
write failures are deliberately absent from this module; they are
logged by ``covers`` and simply leave the book without a cover.
"""


class CatalogError(Exception):
    """Base class for every catalogue error."""


class BookValidationError(CatalogError, ValueError):
    """A request was rejected before anything was written."""


class BookNotFoundError(CatalogError, LookupError):
    """No book exists for the requested identifier."""

    def __init__(self, book_id: int):
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


class StorageError(CatalogError):
    """The backing store could not be read or written."""
