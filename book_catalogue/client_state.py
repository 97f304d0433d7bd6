from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Union

from book_catalogue.book import Book, BookValidationError
from book_catalogue.edit_session import EditSession
from book_catalogue.reactive import Var
from book_catalogue.services.http_client import RemoteBookAPI, TransportError

logger = logging.getLogger(__name__)


class RowState(str, Enum):
    DISPLAY = "display"
    EDITING = "editing"
    SUBMITTING = "submitting"
    REMOVED = "removed"


class InvalidTransitionError(RuntimeError):
    """A row action was triggered from a state that does not allow it."""


class BookViewModel:
    """Client-side wrapper around a Book: the record plus its row state.

    ``is_edited`` decides which rendering the row gets; it stays set while an
    update is in flight so the edit form does not flicker back.
    """

    def __init__(self, book: Book) -> None:
        self.book = book
        self.state = RowState.DISPLAY
        self.session: Optional[EditSession] = None

    @property
    def key(self) -> int:
        return self.book.book_id

    @property
    def is_edited(self) -> bool:
        return self.session is not None

    def __repr__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"BookViewModel(id={self.key}, state={self.state.value})"


class ClientListState:
    """Keyed, ordered mirror of the server's books plus the actions that change it.

    The collection is refreshed on demand, never pushed from the server, so any
    row may be stale. Update and remove outcomes are reconciled per row: a
    ``False`` from the server means another caller already deleted the record.
    """

    def __init__(self, api: RemoteBookAPI) -> None:
        self.api = api
        self.message: Var[str] = Var("")
        self.draft = EditSession()
        self._rows: Dict[int, BookViewModel] = {}
        self._subscribers: List[Callable[["ClientListState"], None]] = []

    # ------------------------- Collection ------------------------- #
    def subscribe(self, callback: Callable[["ClientListState"], None]) -> Callable[[], None]:
        """Call ``callback`` after every change to the collection."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def snapshot(self) -> List[BookViewModel]:
        return list(self._rows.values())

    def get(self, book_id: int) -> Optional[BookViewModel]:
        return self._rows.get(book_id)

    def __iter__(self) -> Iterator[BookViewModel]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._rows

    def add_or_replace(self, vm: BookViewModel) -> None:
        """Upsert by id; an existing row keeps its position."""
        self._rows[vm.key] = vm
        self._notify()

    def remove(self, vm: Union[BookViewModel, int]) -> None:
        key = vm.key if isinstance(vm, BookViewModel) else vm
        if self._rows.pop(key, None) is not None:
            self._notify()

    async def refresh(self) -> None:
        """Replace the whole collection with what the server holds now."""
        try:
            books = await self.api.get_books()
        except TransportError as e:
            self.message.set(f"Server unreachable: {e}")
            raise
        self._rows = {b.book_id: BookViewModel(b) for b in books}
        logger.debug("Refreshed collection with %d books", len(self._rows))
        self._notify()
        self.message.set("Collection updated")

    # ------------------------- Row lifecycle ------------------------- #
    @staticmethod
    def _require(vm: BookViewModel, *states: RowState) -> None:
        if vm.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransitionError(f"Book {vm.key} is {vm.state.value}, expected {allowed}")

    def begin_edit(self, vm: BookViewModel) -> EditSession:
        self._require(vm, RowState.DISPLAY)
        vm.session = EditSession(vm.book)
        vm.state = RowState.EDITING
        self.add_or_replace(vm)
        return vm.session

    def cancel_edit(self, vm: BookViewModel) -> None:
        self._require(vm, RowState.EDITING)
        vm.session = None
        vm.state = RowState.DISPLAY
        self.add_or_replace(vm)

    async def submit_update(self, vm: BookViewModel) -> bool:
        """Send the row's edits to the server.

        On success the edits are committed and the row goes back to display.
        When the server no longer has the record the row is dropped.
        """
        self._require(vm, RowState.EDITING)
        try:
            book = vm.session.to_book(vm.key)
        except BookValidationError as e:
            self.message.set(str(e))
            raise

        vm.state = RowState.SUBMITTING
        self._notify()
        try:
            updated = await self.api.update_book(book)
        except TransportError as e:
            vm.state = RowState.EDITING
            self.add_or_replace(vm)
            self.message.set(f"Server unreachable: {e}")
            raise

        vm.session = None
        if updated:
            vm.book = book
            vm.state = RowState.DISPLAY
            self.add_or_replace(vm)
            self.message.set(f"Updated book '{book.title}'")
        else:
            vm.state = RowState.REMOVED
            self.remove(vm)
            self.message.set(f"Book '{book.title}' has not been found, removed")
        return updated

    async def submit_remove(self, vm: BookViewModel) -> bool:
        """Delete the row's record. The row leaves the list whatever the server says."""
        self._require(vm, RowState.DISPLAY)
        title = vm.book.title
        vm.state = RowState.SUBMITTING
        self._notify()
        self.message.set(f"Removing book '{title}'")
        try:
            removed = await self.api.delete_book(vm.key)
        except TransportError as e:
            vm.state = RowState.DISPLAY
            self._notify()
            self.message.set(f"Server unreachable: {e}")
            raise

        vm.state = RowState.REMOVED
        self.remove(vm)
        if removed:
            self.message.set(f"Removed book '{title}'")
        else:
            self.message.set(f"Book '{title}' was already removed")
        return removed

    async def submit_new(self) -> BookViewModel:
        """Insert the draft as a new book and clear the draft."""
        try:
            book = self.draft.to_book()
        except BookValidationError as e:
            self.message.set(str(e))
            raise

        self.message.set("Adding book")
        try:
            book.book_id = await self.api.insert_book(book)
        except TransportError as e:
            self.message.set(f"Server unreachable: {e}")
            raise

        vm = BookViewModel(book)
        self.add_or_replace(vm)
        self.message.set(f"Added {book.title}")
        self.draft.reset()
        return vm
