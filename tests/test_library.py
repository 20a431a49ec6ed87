from types import GeneratorType
from unittest.mock import MagicMock

import pytest

from book import Book
from catalog_store import load_books, save_books
from conftest import FakeBooksService
from library import Library, open_library
from services.google_books_service import GoogleBookData


def test_fresh_catalog_is_empty(lib, catalog_file):
    assert lib.count_books() == 0
    assert lib.list_books() == []
    assert list(lib.display_lines()) == []
    assert not catalog_file.exists()


def test_add_from_search_assigns_sequential_ids(lib, books_service, catalog_file):
    books_service.results = [GoogleBookData("T1", ["Au1"]), GoogleBookData("T2", ["Au2"])]

    added = lib.add_books_from_search("anything")

    expected = [Book(1, "T1", "Au1"), Book(2, "T2", "Au2")]
    assert added == expected
    assert lib.list_books() == expected
    assert books_service.queries == ["anything"]
    assert load_books(str(catalog_file)) == expected


def test_add_continues_after_highest_id(catalog_file):
    save_books(str(catalog_file), [Book(1, "A", "X"), Book(5, "B", "Y")])
    service = FakeBooksService([GoogleBookData("C", ["Z"]), GoogleBookData("D", ["W"])])
    lib = open_library(str(catalog_file), service)

    added = lib.add_books_from_search("more")

    assert [b.id for b in added] == [6, 7]
    assert [b.id for b in lib.list_books()] == [1, 5, 6, 7]


def test_add_keeps_only_first_author(lib, books_service):
    books_service.results = [GoogleBookData("Good Omens", ["Terry Pratchett", "Neil Gaiman"])]
    lib.add_books_from_search("omens")
    assert lib.find_book(1).author == "Terry Pratchett"


def test_add_without_results_changes_nothing(lib, books_service, catalog_file):
    books_service.results = []
    assert lib.add_books_from_search("nothing") == []
    assert lib.count_books() == 0
    assert not catalog_file.exists()


def test_remove_persists(lib, books_service, catalog_file):
    books_service.results = [GoogleBookData("T1", ["Au1"]), GoogleBookData("T2", ["Au2"])]
    lib.add_books_from_search("two")

    assert lib.remove_book(1) == 1
    assert load_books(str(catalog_file)) == [Book(2, "T2", "Au2")]


def test_remove_is_idempotent(lib, books_service):
    books_service.results = [GoogleBookData("T1", ["Au1"]), GoogleBookData("T2", ["Au2"])]
    lib.add_books_from_search("two")

    lib.remove_book(2)
    once = lib.list_books()
    assert lib.remove_book(2) == 0
    assert lib.list_books() == once


def test_remove_missing_id_still_saves(lib, catalog_file):
    assert lib.remove_book(42) == 0
    assert catalog_file.exists()


def test_new_ids_follow_highest_remaining_id(lib, books_service):
    books_service.results = [GoogleBookData("T1", ["Au1"]), GoogleBookData("T2", ["Au2"])]
    lib.add_books_from_search("two")
    lib.remove_book(2)
    books_service.results = [GoogleBookData("T3", ["Au3"])]
    lib.add_books_from_search("one")
    assert [b.id for b in lib.list_books()] == [1, 2]

    lib.remove_book(1)
    lib.add_books_from_search("one")
    assert [b.id for b in lib.list_books()] == [2, 3]


def test_borrow_and_return_scenario(catalog_file):
    save_books(str(catalog_file), [Book(1, "A", "X")])
    lib = open_library(str(catalog_file), FakeBooksService())

    assert lib.borrow_book(1) is True
    assert lib.list_books() == [Book(1, "A", "X", borrowed=True)]
    assert load_books(str(catalog_file)) == [Book(1, "A", "X", borrowed=True)]

    assert lib.borrow_book(1) is False
    assert lib.list_books() == [Book(1, "A", "X", borrowed=True)]

    assert lib.return_book(1) is True
    assert lib.list_books() == [Book(1, "A", "X")]
    assert load_books(str(catalog_file)) == [Book(1, "A", "X")]


def test_return_of_never_borrowed_book_is_rejected(catalog_file):
    save_books(str(catalog_file), [Book(1, "A", "X")])
    lib = open_library(str(catalog_file), FakeBooksService())

    assert lib.return_book(1) is False
    assert lib.borrow_book(1) is True
    assert lib.return_book(1) is True


def test_rejected_transitions_do_not_save(lib, monkeypatch):
    lib.books.append(Book(1, "A", "X", borrowed=True))
    save_mock = MagicMock()
    monkeypatch.setattr("library.save_books", save_mock)

    assert lib.borrow_book(1) is False
    assert lib.borrow_book(99) is False
    assert lib.return_book(99) is False
    save_mock.assert_not_called()


def test_display_lines_is_lazy_and_restartable(lib):
    lib.books.extend([Book(1, "A", "X"), Book(2, "B", "Y", borrowed=True)])

    lines = lib.display_lines()
    assert isinstance(lines, GeneratorType)
    expected = [
        "ID: 1, Title: A, Author: X, Borrowed: No",
        "ID: 2, Title: B, Author: Y, Borrowed: Yes",
    ]
    assert list(lines) == expected
    assert list(lib.display_lines()) == expected


def test_context_manager_saves_and_closes_service(catalog_file):
    service = FakeBooksService()
    with open_library(str(catalog_file), service) as lib:
        lib.books.append(Book(1, "A", "X"))

    assert service.closed
    assert load_books(str(catalog_file)) == [Book(1, "A", "X")]


def test_close_runs_when_block_raises(catalog_file):
    service = FakeBooksService()
    with pytest.raises(RuntimeError):
        with open_library(str(catalog_file), service) as lib:
            lib.books.append(Book(3, "C", "Z"))
            raise RuntimeError("boom")

    assert service.closed
    assert load_books(str(catalog_file)) == [Book(3, "C", "Z")]


def test_persistence_across_instances(lib, books_service, catalog_file):
    books_service.results = [GoogleBookData("Sapiens", ["Yuval Noah Harari"])]
    lib.add_books_from_search("sapiens")
    lib.borrow_book(1)

    lib2 = Library(str(catalog_file), FakeBooksService()).open()
    assert lib2.count_books() == 1
    assert lib2.find_book(1) == Book(1, "Sapiens", "Yuval Noah Harari", borrowed=True)


def test_with_block_loads_existing_catalog(catalog_file):
    save_books(str(catalog_file), [Book(1, "A", "X"), Book(2, "B", "Y")])

    with Library(str(catalog_file), FakeBooksService()) as lib:
        assert lib.count_books() == 2
        lib.borrow_book(2)

    assert load_books(str(catalog_file)) == [Book(1, "A", "X"), Book(2, "B", "Y", borrowed=True)]


def test_closing_unopened_library_keeps_catalog(catalog_file):
    save_books(str(catalog_file), [Book(1, "A", "X")])
    service = FakeBooksService()

    Library(str(catalog_file), service).close()

    assert service.closed
    assert load_books(str(catalog_file)) == [Book(1, "A", "X")]
