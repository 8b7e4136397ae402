"""
Book service: the create/update/delete/list operations of the catalogue.

The service normalises raw form fields, stores the optional cover and
persists the record. Two create orderings exist, depending on when
the store knows a new book's identifier:

* the store assigns ids on insert (``next_id()`` is ``None``): insert
  the book without a cover, save the cover under the new id, then set
  the cover path with a cover-only update;
* the store can tell the next id up front: save the cover under that
  id first, then insert the complete record in a single write.

Either way the book handed back has a ``cover`` only if the file was
actually written. Every mutating call holds the service lock for its
whole duration.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from ..models import BookForm, CoverFile
from .covers import CoverStore
from .errors import BookNotFoundError, BookValidationError, StorageError
from .normalize import (
    clamp_rating,
    clean_text,
    parse_optional_number,
    parse_price,
    tokenize_keywords,
)
from .schemas import Book
from .store import BookStore

logger = logging.getLogger(__name__)


class BookService:
    def __init__(self, store: BookStore, covers: CoverStore) -> None:
        self.store = store
        self.covers = covers
        self._lock = threading.Lock()

    # -- helpers ---------------------------------------------------------

    @staticmethod
    def _build_book(form: BookForm, book_id: Optional[int] = None, cover: Optional[str] = None) -> Book:
        """Validate and normalise ``form`` into a ``Book``.

        Raises
        ------
        BookValidationError
            If the title is missing or only whitespace.
        """
        title = clean_text(form.title)
        if title is None:
            raise BookValidationError("Le titre est obligatoire.")
        return Book(
            id=book_id,
            title=title,
            author=clean_text(form.author),
            category=clean_text(form.category),
            price=parse_price(form.price),
            original_price=parse_optional_number(form.original_price),
            rating=clamp_rating(parse_optional_number(form.rating)),
            description=clean_text(form.desc),
            keywords=tokenize_keywords(form.keywords),
            cover=cover,
        )

    def _store_cover(self, book_id: int, cover: Optional[CoverFile]) -> Optional[str]:
        if cover is None or cover.is_empty:
            return None
        return self.covers.store(book_id, cover.content, cover.filename)

    def _discard(self, book_id: int) -> None:
        """Remove a half-created book after a failed follow-up write."""
        try:
            self.store.delete_by_id(book_id)
        except StorageError as exc:
            logger.error("Could not roll back book %s: %s", book_id, exc)
        else:
            logger.warning("Rolled back book %s after its cover could not be attached", book_id)

    # -- queries ---------------------------------------------------------

    def list_books(self) -> List[Book]:
        return self.store.list_all()

    def get_book(self, book_id: int) -> Book:
        book = self.store.find_by_id(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    # -- mutations -------------------------------------------------------

    def create_book(self, form: BookForm, cover: Optional[CoverFile] = None) -> Book:
        """Create a book, attaching ``cover`` when one was uploaded."""
        book = self._build_book(form)
        with self._lock:
            reserved_id = self.store.next_id()
            if reserved_id is None:
                created = self.store.insert(book)
                path = self._store_cover(created.id, cover)
                if path is not None:
                    try:
                        attached = self.store.update_cover_only(created.id, path)
                    except StorageError:
                        self._discard(created.id)
                        raise
                    if attached:
                        created = created.model_copy(update={"cover": path})
                    else:
                        logger.warning("Book %s vanished before its cover was attached", created.id)
            else:
                path = self._store_cover(reserved_id, cover)
                created = self.store.insert(book.model_copy(update={"id": reserved_id, "cover": path}))
        logger.info("Created book %s (%r)", created.id, created.title)
        return created

    def update_book(self, book_id: int, form: BookForm, cover: Optional[CoverFile] = None) -> Book:
        """Replace every field of a book.

        Without a new upload the current cover is kept; the previous cover
        file stays on disk either way.
        """
        with self._lock:
            existing = self.store.find_by_id(book_id)
            if existing is None:
                raise BookNotFoundError(book_id)
            book = self._build_book(form, book_id=book_id, cover=existing.cover)
            path = self._store_cover(book_id, cover)
            if path is not None:
                book = book.model_copy(update={"cover": path})
            if not self.store.update(book):
                raise BookNotFoundError(book_id)
        logger.info("Updated book %s", book_id)
        return book

    def delete_book(self, book_id: int) -> None:
        """Delete a book. Its cover file is intentionally left in place."""
        with self._lock:
            if self.store.find_by_id(book_id) is None:
                raise BookNotFoundError(book_id)
            if not self.store.delete_by_id(book_id):
                raise BookNotFoundError(book_id)
        logger.info("Deleted book %s", book_id)
