import logging
from typing import List, Optional

import httpx

from book_catalogue.book import Book
from book_catalogue.config import settings

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """The server could not be reached or answered with an error status."""


class RemoteBookAPI:
    """Async caller for the four catalogue calls.

    Every method issues exactly one request and hands the server's answer back
    unchanged. Nothing is retried here; a failed call surfaces as TransportError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=transport,
                timeout=httpx.Timeout(timeout or settings.request_timeout),
            )
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    async def get_books(self) -> List[Book]:
        response = await self._request("GET", "/books")
        return [Book.from_dict(item) for item in response.json()]

    async def insert_book(self, book: Book) -> int:
        payload = book.to_dict()
        payload["id"] = 0
        response = await self._request("POST", "/books", json=payload)
        return int(response.json())

    async def delete_book(self, book_id: int) -> bool:
        response = await self._request("DELETE", f"/books/{book_id}")
        return bool(response.json())

    async def update_book(self, book: Book) -> bool:
        response = await self._request("PUT", "/books", json=book.to_dict())
        return bool(response.json())

    async def close(self):
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
