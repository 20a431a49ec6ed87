import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

import httpx

from config import settings
from utils.validators import TextValidator


logger = logging.getLogger(__name__)


@dataclass
class GoogleBookData:
    """A search candidate extracted from a Google Books volume"""
    title: str
    authors: List[str] = field(default_factory=list)

    @property
    def author(self) -> str:
        # Only the first listed author is kept in the catalog
        return self.authors[0]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "authors": self.authors}


class GoogleBooksService:
    """Service for searching the Google Books volumes endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or settings.google_books_api_key
        self.base_url = base_url or settings.google_books_url
        self.timeout = timeout if timeout is not None else settings.google_books_timeout
        self._client = client or httpx.Client(timeout=self.timeout, follow_redirects=True)

    def _make_api_request(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Make a single blocking request; None on any transport or format failure"""
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = self._client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"API request failed: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"API request failed: {response.status_code} - {response.text}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"API response is not valid JSON: {e}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Unexpected API response type: {type(data).__name__}")
            return None
        return data

    def _parse_volume_info(self, item: Any) -> Optional[GoogleBookData]:
        """Parse one entry of the ``items`` list, or None if it is malformed"""
        volume_info = item.get("volumeInfo") if isinstance(item, dict) else None
        if not isinstance(volume_info, dict):
            logger.warning("Skipping volume without volumeInfo")
            return None

        title = volume_info.get("title")
        authors = volume_info.get("authors")
        if not TextValidator.has_text(title):
            logger.warning(f"Skipping volume without a title: {item.get('id', '?')}")
            return None
        if not isinstance(authors, list) or not authors or not TextValidator.has_text(authors[0]):
            logger.warning(f"Skipping volume without authors: {title!r}")
            return None

        return GoogleBookData(
            title=TextValidator.to_single_line(title),
            authors=[TextValidator.to_single_line(a) for a in authors if TextValidator.has_text(a)],
        )

    def search_books(self, query: str) -> List[GoogleBookData]:
        """
        Search for books using a free-text query

        Args:
            query: Search query (title, author, etc.)

        Returns:
            List of GoogleBookData objects; empty when nothing was found
            or the request failed
        """
        if not query or not query.strip():
            logger.warning("Empty search query provided")
            return []

        response = self._make_api_request({"q": query.strip()})
        if response is None:
            return []

        items = response.get("items", [])
        if not isinstance(items, list):
            logger.error(f"Unexpected 'items' in API response for query: {query}")
            return []

        books = []
        for item in items:
            book_data = self._parse_volume_info(item)
            if book_data:
                books.append(book_data)

        if books:
            logger.info(f"Found {len(books)} books for query: {query}")
        else:
            logger.info(f"No books found for query: {query}")
        return books

    def close(self) -> None:
        """Close the underlying HTTP client"""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
