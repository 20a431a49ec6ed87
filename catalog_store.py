"""Flat-file persistence for the catalog.

Each book is stored as four lines: id, title, author and the borrowed flag
written as ``1`` or ``0``. The whole file is rewritten on every save.
"""

import logging
import os
import tempfile
from typing import Iterable, List, Optional

from book import Book
from utils.validators import TextValidator

logger = logging.getLogger(__name__)

LINES_PER_RECORD = 4
_FLAG_VALUES = {"1": True, "0": False}


def format_books(books: Iterable[Book]) -> str:
    """Serialize books to the four-lines-per-record text format.

    Line breaks inside a title or author would shift every following field,
    so they are written as spaces.
    """
    parts = []
    for book in books:
        title = TextValidator.flatten_line_breaks(book.title)
        author = TextValidator.flatten_line_breaks(book.author)
        parts.append(f"{book.id}\n{title}\n{author}\n{1 if book.borrowed else 0}\n")
    return "".join(parts)


def parse_books(text: str, source: str = "<catalog>") -> List[Book]:
    """Parse the text format back into books.

    Reading stops at the first malformed or incomplete record; everything
    from that record on is ignored and reported with a warning.
    """
    lines = text.split("\n")
    # Trailing blank lines are not data
    while lines and not lines[-1].strip():
        lines.pop()

    books: List[Book] = []
    index = 0
    while index < len(lines):
        problem = _record_problem(lines, index)
        if problem:
            ignored = len(lines) - index
            logger.warning(
                f"Stopped reading {source} at line {index + 1}: {problem}; "
                f"{ignored} line(s) ignored, {len(books)} book(s) loaded"
            )
            break
        id_line, title, author, flag = lines[index:index + LINES_PER_RECORD]
        books.append(Book(id=int(id_line), title=title, author=author, borrowed=_FLAG_VALUES[flag.strip()]))
        index += LINES_PER_RECORD
    return books


def _record_problem(lines: List[str], index: int) -> Optional[str]:
    try:
        int(lines[index])
    except ValueError:
        return f"{lines[index]!r} is not a book id"
    if len(lines) - index < LINES_PER_RECORD:
        return "incomplete record"
    flag = lines[index + LINES_PER_RECORD - 1].strip()
    if flag not in _FLAG_VALUES:
        return f"{flag!r} is not a borrowed flag (expected 0 or 1)"
    return None


def load_books(path: str) -> List[Book]:
    """Load the catalog; a missing file is an empty catalog."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        logger.debug(f"No catalog at {path}, starting empty")
        return []
    books = parse_books(text, source=path)
    logger.debug(f"Loaded {len(books)} book(s) from {path}")
    return books


def save_books(path: str, books: Iterable[Book]) -> None:
    """Rewrite the whole catalog file.

    The new contents go to a temporary file in the same directory which then
    replaces ``path``, so a failed write leaves the previous catalog intact.
    """
    payload = format_books(books)
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".catalog-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.debug(f"Saved catalog to {path}")
