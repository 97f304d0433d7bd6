from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")


class Var(Generic[T]):
    """A mutable value that notifies subscribers whenever it is set to something new."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: List[Callable[[T], None]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    value = property(get, set)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register ``callback``; the returned function removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"Var({self._value!r})"
