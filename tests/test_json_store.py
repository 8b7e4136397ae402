"""Tests for the JSON file book store."""
import json
import logging

import pytest

from bookstore.catalog.errors import StorageError
from bookstore.catalog.schemas import Book
from bookstore.catalog.store import JsonBookStore


def make_book(title, **fields):
    return Book(title=title, **fields)


def test_missing_file_is_an_empty_catalogue(json_store):
    assert json_store.list_all() == []
    assert json_store.find_by_id(1) is None
    assert json_store.next_id() == 1


def test_round_trip_preserves_every_field(json_store):
    written = [
        json_store.insert(
            make_book(
                f"Livre {i}",
                author="Auteur",
                category="Roman",
                price=10.0 + i,
                original_price=20.0,
                rating=4.5,
                description="Une description",
                keywords=["z", "a", "m", "a"],
                cover=f"/image/book_{i}_1.png",
            )
        )
        for i in range(5)
    ]

    reloaded = JsonBookStore(json_store.path).list_all()

    assert reloaded == written
    assert [b.id for b in reloaded] == [1, 2, 3, 4, 5]
    assert reloaded[0].keywords == ["z", "a", "m", "a"]


def test_insert_assigns_max_plus_one(json_store):
    json_store.insert(make_book("A"))
    second = json_store.insert(make_book("B"))
    json_store.delete_by_id(1)

    third = json_store.insert(make_book("C"))

    assert second.id == 2
    assert third.id == 3
    assert json_store.next_id() == 4


def test_insert_keeps_reserved_id_unless_taken(json_store, caplog):
    assert json_store.insert(make_book("A", id=json_store.next_id())).id == 1
    assert "Reserved id" not in caplog.text

    # id 1 is taken now, so a stale reservation falls back to max + 1
    with caplog.at_level(logging.WARNING, logger="bookstore.catalog.store"):
        assert json_store.insert(make_book("B", id=1)).id == 2
    assert "Reserved id 1 is already taken" in caplog.text


def test_file_layout(json_store):
    json_store.insert(make_book("Titre", original_price=12.0, description="texte"))

    with json_store.path.open(encoding="utf-8") as f:
        data = json.load(f)

    assert data == [{"id": 1, "title": "Titre", "originalPrice": 12.0, "desc": "texte", "keywords": []}]


def test_update_and_cover_only(json_store):
    book = json_store.insert(make_book("Avant", author="X"))

    assert json_store.update_cover_only(book.id, "/image/book_1_5.png")
    assert json_store.find_by_id(book.id).cover == "/image/book_1_5.png"

    replacement = Book(id=book.id, title="Après")
    assert json_store.update(replacement)
    assert json_store.find_by_id(book.id) == replacement


def test_unknown_ids(json_store):
    json_store.insert(make_book("Seul"))

    assert not json_store.update(Book(id=42, title="Nope"))
    assert not json_store.update_cover_only(42, "/image/x.png")
    assert not json_store.delete_by_id(42)
    assert len(json_store.list_all()) == 1


def test_corrupt_file_lists_empty_but_blocks_writes(json_store):
    json_store.path.parent.mkdir(parents=True)
    json_store.path.write_text("{ not json", encoding="utf-8")

    assert json_store.list_all() == []
    with pytest.raises(StorageError):
        json_store.insert(make_book("A"))
    with pytest.raises(StorageError):
        json_store.find_by_id(1)
    assert json_store.path.read_text(encoding="utf-8") == "{ not json"


def test_non_array_document_is_unreadable(json_store):
    json_store.path.parent.mkdir(parents=True)
    json_store.path.write_text('{"id": 1}', encoding="utf-8")

    assert json_store.list_all() == []
    with pytest.raises(StorageError):
        json_store.next_id()


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = JsonBookStore(blocker / "books.json")

    with pytest.raises(StorageError):
        store.insert(make_book("A"))


def test_no_temp_files_left_behind(json_store):
    json_store.insert(make_book("A"))
    json_store.insert(make_book("B"))

    assert [p.name for p in json_store.path.parent.iterdir()] == ["books.json"]
