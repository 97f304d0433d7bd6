from __future__ import annotations

from typing import Optional

from book_catalogue.book import Book, format_date, parse_date
from book_catalogue.reactive import Var


class EditSession:
    """Editable string buffer for one book.

    Used for a row being edited and for the single "new book" draft. Nothing
    here touches the record it was seeded from until ``to_book`` is called and
    the caller commits the result.
    """

    def __init__(self, book: Optional[Book] = None) -> None:
        book = book or Book.empty()
        self.title: Var[str] = Var(book.title)
        self.author: Var[str] = Var(book.author)
        self.publish_date: Var[str] = Var(format_date(book.publish_date))
        self.isbn: Var[str] = Var(book.isbn)

    def load(self, book: Book) -> None:
        self.title.set(book.title)
        self.author.set(book.author)
        self.publish_date.set(format_date(book.publish_date))
        self.isbn.set(book.isbn)

    def reset(self) -> None:
        """Back to empty defaults (publish date = today)."""
        self.load(Book.empty())

    def to_book(self, book_id: int = 0) -> Book:
        """Build a Book from the buffer. Raises BookValidationError on a bad date."""
        return Book(
            title=self.title.get(),
            author=self.author.get(),
            publish_date=parse_date(self.publish_date.get()),
            isbn=self.isbn.get(),
            book_id=book_id,
        )
