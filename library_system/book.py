from __future__ import annotations


class Book:
    """Represents a single book item in the library."""

    def __init__(self, isbn: str, title: str, author: str, available: bool = True) -> None:
        self.isbn = isbn
        self.title = title
        self.author = author
        self.available = available

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return (f"ISBN: {self.isbn:<15} Title: {self.title:<25} Author: {self.author:<20} "
                f"Available: {'Yes' if self.available else 'No'}")

    def to_dict(self) -> dict:
        return {"isbn": self.isbn, "title": self.title, "author": self.author, "available": self.available}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(isbn=data["isbn"], title=data["title"], author=data["author"],
                    available=data.get("available", True))
