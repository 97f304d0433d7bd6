from __future__ import annotations

from datetime import date, datetime


class BookValidationError(ValueError):
    """Raised when user-entered text cannot be turned into a Book."""


DATE_FORMAT = "%Y-%m-%d"


def format_date(value: date) -> str:
    """Render a calendar date as the zero-padded ``YYYY-MM-DD`` wire string."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` wire string back into a calendar date."""
    if text is None:
        raise BookValidationError("Publish date is required.")
    raw = str(text).strip()
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError as exc:
        raise BookValidationError(f"Invalid publish date '{raw}', expected YYYY-MM-DD.") from exc


class Book:
    """A single book record of the catalogue.

    ``book_id`` 0 means the record has not been stored yet; the store assigns
    positive ids on insert.
    """

    def __init__(self, title: str, author: str, publish_date: date, isbn: str, book_id: int = 0) -> None:
        self.book_id = book_id
        self.title = title
        self.author = author
        self.publish_date = publish_date
        self.isbn = isbn

    @staticmethod
    def empty() -> "Book":
        return Book(title="", author="", publish_date=date.today(), isbn="")

    def copy(self) -> "Book":
        return Book(self.title, self.author, self.publish_date, self.isbn, book_id=self.book_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"Book(id={self.book_id}, title={self.title!r})"

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({format_date(self.publish_date)}, ISBN: {self.isbn})"

    def to_dict(self) -> dict:
        return {
            "id": self.book_id,
            "title": self.title,
            "author": self.author,
            "publishDate": format_date(self.publish_date),
            "isbn": self.isbn,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        publish_date = data.get("publishDate")
        if not isinstance(publish_date, date):
            publish_date = parse_date(publish_date)
        return Book(
            title=data.get("title") or "",
            author=data.get("author") or "",
            publish_date=publish_date,
            isbn=data.get("isbn") or "",
            book_id=int(data.get("id") or 0),
        )
