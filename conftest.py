import pytest

from library import Library
from config import settings


class FakeBooksService:
    """Stands in for GoogleBooksService; returns canned candidates."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.queries = []
        self.closed = False

    def search_books(self, query):
        self.queries.append(query)
        return list(self.results)

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.setattr(settings, "output_mode", "plain")


@pytest.fixture
def catalog_file(tmp_path):
    # Her test için benzersiz bir katalog dosyası
    return tmp_path / "books.txt"


@pytest.fixture
def books_service():
    return FakeBooksService()


@pytest.fixture
def lib(catalog_file, books_service):
    lib = Library(catalog_file=str(catalog_file), books_service=books_service).open()
    yield lib
    lib.close()
