from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Book:
    """Represents a single book record in the catalog."""

    id: int
    title: str
    author: str
    borrowed: bool = False

    def __str__(self) -> str:
        return (
            f"ID: {self.id}, Title: {self.title}, Author: {self.author}, "
            f"Borrowed: {'Yes' if self.borrowed else 'No'}"
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author, "borrowed": self.borrowed}
