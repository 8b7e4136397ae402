"""
Relational ``BookStore`` backed by SQLAlchemy.

Identifiers come from the database's auto-increment primary key, so
``next_id()`` returns ``None`` and the service inserts a book before
it can name the cover file after it. Keywords live in a JSON column
to keep their order. Any ``SQLAlchemyError`` surfaces as
``StorageError``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import JSON, Float, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .errors import StorageError
from .schemas import Book
from .store import BookStore

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class BookRow(Base):
    __tablename__ = "book"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(255))
    category: Mapped[Optional[str]] = mapped_column(String(255))
    price: Mapped[Optional[float]] = mapped_column(Float)
    original_price: Mapped[Optional[float]] = mapped_column(Float)
    rating: Mapped[Optional[float]] = mapped_column(Float)
    description: Mapped[Optional[str]] = mapped_column(Text)
    keywords: Mapped[Optional[list]] = mapped_column(JSON)
    cover: Mapped[Optional[str]] = mapped_column(String(512))

    def to_book(self) -> Book:
        return Book(
            id=self.id,
            title=self.title,
            author=self.author,
            category=self.category,
            price=self.price,
            original_price=self.original_price,
            rating=self.rating,
            description=self.description,
            keywords=list(self.keywords or []),
            cover=self.cover,
        )

    def assign(self, book: Book) -> None:
        self.title = book.title
        self.author = book.author
        self.category = book.category
        self.price = book.price
        self.original_price = book.original_price
        self.rating = book.rating
        self.description = book.description
        self.keywords = list(book.keywords)
        self.cover = book.cover


class SqlBookStore(BookStore):
    """Store books in the ``book`` table of ``url``.

    Parameters
    ----------
    url : str
        SQLAlchemy database URL, e.g. ``sqlite:///data/books.db``.
    echo : bool
        Log emitted SQL, handy when debugging.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        connect_args = {}
        if url.startswith("sqlite"):
            # Requests are handled on worker threads.
            connect_args["check_same_thread"] = False
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not initialise book table: {exc}") from exc
        logger.info("Book table ready on %s", self.engine.url.render_as_string(hide_password=True))

    def _session(self) -> Session:
        return self._sessions()

    def list_all(self) -> List[Book]:
        try:
            with self._session() as session:
                rows = session.scalars(select(BookRow).order_by(BookRow.id)).all()
                return [row.to_book() for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not list books: {exc}") from exc

    def find_by_id(self, book_id: int) -> Optional[Book]:
        try:
            with self._session() as session:
                row = session.get(BookRow, book_id)
                return row.to_book() if row is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not load book {book_id}: {exc}") from exc

    def insert(self, book: Book) -> Book:
        row = BookRow()
        row.assign(book)
        try:
            with self._session() as session, session.begin():
                session.add(row)
            return row.to_book()
        except SQLAlchemyError as exc:
            logger.error("Insert of %r failed: %s", book.title, exc)
            raise StorageError(f"Could not insert book: {exc}") from exc

    def update_cover_only(self, book_id: int, cover: Optional[str]) -> bool:
        try:
            with self._session() as session, session.begin():
                row = session.get(BookRow, book_id)
                if row is None:
                    return False
                row.cover = cover
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update cover of book {book_id}: {exc}") from exc

    def update(self, book: Book) -> bool:
        try:
            with self._session() as session, session.begin():
                row = session.get(BookRow, book.id)
                if row is None:
                    return False
                row.assign(book)
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not update book {book.id}: {exc}") from exc

    def delete_by_id(self, book_id: int) -> bool:
        try:
            with self._session() as session, session.begin():
                row = session.get(BookRow, book_id)
                if row is None:
                    return False
                session.delete(row)
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not delete book {book_id}: {exc}") from exc

    def close(self) -> None:
        self.engine.dispose()
