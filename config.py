import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    return float(raw) if raw else None


@dataclass
class Settings:
    # Catalog storage
    catalog_file: str = os.getenv("LIBRARY_CATALOG_FILE", "books.txt")

    # Google Books API
    google_books_url: str = os.getenv("GOOGLE_BOOKS_URL", "https://www.googleapis.com/books/v1/volumes")
    google_books_api_key: Optional[str] = os.getenv("GOOGLE_BOOKS_API_KEY")
    google_books_timeout: Optional[float] = _optional_float("GOOGLE_BOOKS_TIMEOUT")  # None = no timeout

    # CLI
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    output_mode: str = os.getenv("LIBRARY_OUTPUT", "plain")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()


settings = Settings()
