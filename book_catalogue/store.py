import logging
from datetime import date
from threading import Lock
from typing import Dict, List, Optional

from book_catalogue.book import Book

logger = logging.getLogger(__name__)

SEED_BOOK_ID = 1


def seed_book() -> Book:
    return Book(
        title="Expert F# 4.0",
        author="Don Syme, Adam Granicz, Antonio Cisternino",
        publish_date=date(2015, 12, 28),
        isbn="978-1-484207-41-3",
        book_id=SEED_BOOK_ID,
    )


class BookStore:
    """Authoritative in-memory collection of books, safe for concurrent callers.

    Ids are handed out from a counter guarded by the same lock that stores the
    record, so no two inserts can ever receive the same id. Records are copied
    on the way in and on the way out; callers never share a Book with the store.
    """

    def __init__(self, seed: bool = True) -> None:
        self._lock = Lock()
        self._books: Dict[int, Book] = {}
        self._last_id = 0
        if seed:
            book = seed_book()
            self._books[book.book_id] = book
            self._last_id = book.book_id
            logger.info("Book store seeded with '%s' (id=%s)", book.title, book.book_id)

    # ------------------------- Core operations ------------------------- #
    def list_all(self) -> List[Book]:
        """Snapshot of every record in insertion order."""
        with self._lock:
            return [b.copy() for b in self._books.values()]

    def get(self, book_id: int) -> Optional[Book]:
        with self._lock:
            book = self._books.get(book_id)
            return book.copy() if book else None

    def insert(self, book: Book) -> int:
        """Store a new record under a freshly allocated id and return that id.

        Whatever id the incoming book carries is ignored.
        """
        stored = book.copy()
        with self._lock:
            self._last_id += 1
            stored.book_id = self._last_id
            self._books[stored.book_id] = stored
        logger.debug("Inserted book id=%s title=%r", stored.book_id, stored.title)
        return stored.book_id

    def delete(self, book_id: int) -> bool:
        """Remove a record. False when it was already gone or never existed."""
        with self._lock:
            removed = self._books.pop(book_id, None)
        if removed is None:
            logger.debug("Delete of id=%s found nothing", book_id)
            return False
        logger.debug("Deleted book id=%s", book_id)
        return True

    def update(self, book: Book) -> bool:
        """Replace the record with ``book.book_id`` wholesale; last writer wins."""
        with self._lock:
            if book.book_id not in self._books:
                logger.debug("Update of id=%s found nothing", book.book_id)
                return False
            self._books[book.book_id] = book.copy()
        logger.debug("Updated book id=%s", book.book_id)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)
