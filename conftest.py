import httpx
import pytest
from fastapi.testclient import TestClient

from book_catalogue.api import create_app
from book_catalogue.services.http_client import RemoteBookAPI, TransportError
from book_catalogue.store import BookStore


class StoreBackedAPI:
    """In-process stand-in for RemoteBookAPI that calls a BookStore directly.

    Set ``fail`` to make every call raise TransportError; ``calls`` records
    the call names in order.
    """

    def __init__(self, store: BookStore) -> None:
        self.store = store
        self.fail = False
        self.calls = []

    def _check(self, name):
        self.calls.append(name)
        if self.fail:
            raise TransportError(f"{name} failed: connection refused")

    async def get_books(self):
        self._check("get_books")
        return self.store.list_all()

    async def insert_book(self, book):
        self._check("insert_book")
        return self.store.insert(book)

    async def delete_book(self, book_id):
        self._check("delete_book")
        return self.store.delete(book_id)

    async def update_book(self, book):
        self._check("update_book")
        return self.store.update(book)


@pytest.fixture
def store():
    # A fresh seeded store per test
    return BookStore()


@pytest.fixture
def api_app(store):
    return create_app(store=store)


@pytest.fixture
def client(api_app):
    with TestClient(api_app) as test_client:
        yield test_client


@pytest.fixture
def fake_api(store):
    return StoreBackedAPI(store)


@pytest.fixture
def make_remote(api_app):
    """Factory for RemoteBookAPI instances routed straight into the test app."""

    def factory():
        return RemoteBookAPI("http://testserver", transport=httpx.ASGITransport(app=api_app))

    return factory
