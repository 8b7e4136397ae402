"""Tests for the SQLAlchemy book store."""
from bookstore.catalog.schemas import Book
from bookstore.catalog.sql_store import SqlBookStore


def test_ids_come_from_the_database(sql_store):
    assert sql_store.next_id() is None

    first = sql_store.insert(Book(title="Un"))
    second = sql_store.insert(Book(title="Deux"))

    assert (first.id, second.id) == (1, 2)
    assert [b.title for b in sql_store.list_all()] == ["Un", "Deux"]


def test_round_trip_preserves_every_field(sql_store, tmp_path):
    written = sql_store.insert(
        Book(
            title="Complet",
            author="Auteur",
            category="Essai",
            price=9.5,
            original_price=3.0,
            rating=0.0,
            description="desc",
            keywords=["b", "a", "b"],
            cover="/image/book_1_1.jpg",
        )
    )

    other = SqlBookStore(f"sqlite:///{tmp_path / 'books.db'}")
    try:
        assert other.find_by_id(written.id) == written
        assert other.list_all() == [written]
    finally:
        other.close()


def test_update_cover_only_leaves_other_fields(sql_store):
    book = sql_store.insert(Book(title="Couverture", keywords=["x"]))

    assert sql_store.update_cover_only(book.id, "/image/book_1_2.png")

    stored = sql_store.find_by_id(book.id)
    assert stored.cover == "/image/book_1_2.png"
    assert stored.keywords == ["x"]
    assert stored.title == "Couverture"


def test_update_replaces_every_field(sql_store):
    book = sql_store.insert(Book(title="Ancien", author="A", rating=2.0))

    assert sql_store.update(Book(id=book.id, title="Nouveau"))

    stored = sql_store.find_by_id(book.id)
    assert stored == Book(id=book.id, title="Nouveau")


def test_unknown_ids(sql_store):
    assert sql_store.find_by_id(99) is None
    assert not sql_store.update(Book(id=99, title="x"))
    assert not sql_store.update_cover_only(99, "/image/x.png")
    assert not sql_store.delete_by_id(99)


def test_delete(sql_store):
    book = sql_store.insert(Book(title="Éphémère"))

    assert sql_store.delete_by_id(book.id)
    assert sql_store.list_all() == []
