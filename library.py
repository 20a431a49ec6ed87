import logging
from typing import Iterator, List, Optional

from book import Book
from catalog_store import load_books, save_books
from config import settings
from services.google_books_service import GoogleBooksService

logger = logging.getLogger(__name__)


class Library:
    """Manages the catalog of books and its persistence.

    The catalog is loaded by ``open()`` and written back after every
    successful change and once more by ``close()``. Use the library as a
    context manager so ``close()`` runs on every exit path.
    """

    def __init__(self, catalog_file: Optional[str] = None, books_service: Optional[GoogleBooksService] = None) -> None:
        self.catalog_file = catalog_file or settings.catalog_file
        self.books_service = books_service or GoogleBooksService()
        self.books: List[Book] = []
        self.is_open = False

    # ------------------------- Lifecycle ------------------------- #
    def open(self) -> "Library":
        self.books = load_books(self.catalog_file)
        self.is_open = True
        logger.info(f"Opened catalog {self.catalog_file} with {len(self.books)} book(s)")
        return self

    def close(self) -> None:
        # A library that never loaded its catalog must not overwrite it
        try:
            if self.is_open:
                self._save()
        finally:
            self.is_open = False
            self.books_service.close()

    def __enter__(self) -> "Library":
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------- Core operations ------------------------- #
    def add_books_from_search(self, query: str) -> List[Book]:
        """Append every search result as a new book. Returns the added books."""
        candidates = self.books_service.search_books(query)
        if not candidates:
            return []

        next_id = self.next_id()
        added = []
        for offset, candidate in enumerate(candidates):
            book = Book(id=next_id + offset, title=candidate.title, author=candidate.author)
            self.books.append(book)
            added.append(book)
        self._save()
        logger.info(f"Added {len(added)} book(s) for query {query!r}")
        return added

    def remove_book(self, book_id: int) -> int:
        """Remove every record with ``book_id``; the catalog is saved even if none matched."""
        remaining = [b for b in self.books if b.id != book_id]
        removed = len(self.books) - len(remaining)
        self.books = remaining
        self._save()
        return removed

    def borrow_book(self, book_id: int) -> bool:
        for book in self.books:
            if book.id == book_id and not book.borrowed:
                book.borrowed = True
                self._save()
                return True
        return False

    def return_book(self, book_id: int) -> bool:
        for book in self.books:
            if book.id == book_id and book.borrowed:
                book.borrowed = False
                self._save()
                return True
        return False

    def display_lines(self) -> Iterator[str]:
        """Yield one display line per book; each call starts a new pass."""
        for book in self.books:
            yield str(book)

    def count_books(self) -> int:
        return len(self.books)

    def list_books(self) -> List[Book]:
        return list(self.books)

    def find_book(self, book_id: int) -> Optional[Book]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def next_id(self) -> int:
        return max((b.id for b in self.books), default=0) + 1

    # ------------------------- Persistence ------------------------- #
    def _save(self) -> None:
        save_books(self.catalog_file, self.books)


def open_library(catalog_file: Optional[str] = None, books_service: Optional[GoogleBooksService] = None) -> Library:
    """Create a library and load its catalog."""
    return Library(catalog_file=catalog_file, books_service=books_service).open()
