"""
Book storage for the catalogue API.

``BookStore`` is the contract the service talks to. Two strategies
implement it and one is selected per deployment (see
``bookstore.storage``):

* ``JsonBookStore`` below keeps the whole catalogue in a single JSON
  array on disk. It has no transactions or row locks, so each call
  takes a lock, reads the full set, mutates it in memory and rewrites
  the file. Every write therefore costs O(n) I/O, but no update is lost
  within one process.
* ``SqlBookStore`` in ``sql_store`` uses a relational database through
  SQLAlchemy.
"""

from __future__ import annotations

import abc
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from .errors import StorageError
from .schemas import Book

logger = logging.getLogger(__name__)


class BookStore(abc.ABC):
    """Durable storage of ``Book`` records."""

    @abc.abstractmethod
    def list_all(self) -> List[Book]:
        """Return every book, ordered by identifier or insertion."""

    @abc.abstractmethod
    def find_by_id(self, book_id: int) -> Optional[Book]:
        """Return the book with ``book_id``, or ``None``."""

    @abc.abstractmethod
    def insert(self, book: Book) -> Book:
        """Persist a new book and return it with its identifier set."""

    @abc.abstractmethod
    def update_cover_only(self, book_id: int, cover: Optional[str]) -> bool:
        """Set only the cover path. ``False`` when the id is unknown."""

    @abc.abstractmethod
    def update(self, book: Book) -> bool:
        """Replace every field of an existing book. ``False`` when unknown."""

    @abc.abstractmethod
    def delete_by_id(self, book_id: int) -> bool:
        """Remove a book. ``False`` when the id is unknown."""

    def next_id(self) -> Optional[int]:
        """Identifier the next ``insert`` will use.

        Stores whose ids are only known once the row exists (database
        auto-increment) return ``None``.
        """
        return None

    def close(self) -> None:
        """Release any resources held by the store."""


class JsonBookStore(BookStore):
    """Catalogue kept as a pretty-printed JSON array in ``path``.

    Reads and writes share a single re-entrant lock so a reader never
    sees a half-rewritten file. Writes go to a temporary file in the
    same directory which then replaces the data file.
    """

    def __init__(self, path: Union[Path, str]) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    # -- file access -----------------------------------------------------

    def _read(self) -> List[Book]:
        """Load every book, raising ``StorageError`` if the file is unusable.

        A missing file is an empty catalogue, not an error.
        """
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise StorageError(f"{self.path} does not hold a JSON array")
            return [Book.model_validate(entry) for entry in raw]
        except (OSError, ValueError, ValidationError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc

    def _read_lenient(self) -> List[Book]:
        try:
            return self._read()
        except StorageError as exc:
            logger.warning("%s; treating catalogue as empty", exc)
            return []

    def _write(self, books: List[Book]) -> None:
        data = [b.to_json() for b in books]
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Could not write %s: %s", self.path, exc)
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    @staticmethod
    def _max_id(books: List[Book]) -> int:
        return max((b.id for b in books if b.id is not None), default=0)

    # -- BookStore -------------------------------------------------------

    def list_all(self) -> List[Book]:
        with self._lock:
            return self._read_lenient()

    def find_by_id(self, book_id: int) -> Optional[Book]:
        with self._lock:
            return next((b for b in self._read() if b.id == book_id), None)

    def next_id(self) -> Optional[int]:
        with self._lock:
            return self._max_id(self._read()) + 1

    def insert(self, book: Book) -> Book:
        with self._lock:
            books = self._read()
            book_id = book.id
            # A reserved id from next_id() is kept unless it is already taken.
            if book_id is None or any(b.id == book_id for b in books):
                if book_id is not None:
                    logger.warning(
                        "Reserved id %s is already taken; storing %r under id %s",
                        book_id, book.title, self._max_id(books) + 1,
                    )
                book_id = self._max_id(books) + 1
            stored = book.model_copy(update={"id": book_id})
            books.append(stored)
            self._write(books)
            return stored

    def update_cover_only(self, book_id: int, cover: Optional[str]) -> bool:
        with self._lock:
            books = self._read()
            for i, b in enumerate(books):
                if b.id == book_id:
                    books[i] = b.model_copy(update={"cover": cover})
                    self._write(books)
                    return True
            return False

    def update(self, book: Book) -> bool:
        with self._lock:
            books = self._read()
            for i, b in enumerate(books):
                if b.id == book.id:
                    books[i] = book
                    self._write(books)
                    return True
            return False

    def delete_by_id(self, book_id: int) -> bool:
        with self._lock:
            books = self._read()
            remaining = [b for b in books if b.id != book_id]
            if len(remaining) == len(books):
                return False
            self._write(remaining)
            return True
