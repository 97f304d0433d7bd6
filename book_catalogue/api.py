import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Path, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from book_catalogue.book import Book, BookValidationError
from book_catalogue.config import Settings, settings as default_settings
from book_catalogue.store import BookStore

logger = logging.getLogger(__name__)


# --- Models ---
class BookModel(BaseModel):
    id: int = Field(default=0, description="Assigned by the store; ignored on insert")
    title: str
    author: str
    publishDate: str = Field(description="Calendar date as YYYY-MM-DD")
    isbn: str


class HealthModel(BaseModel):
    status: str
    timestamp: str
    total_books: int


# --- Dependencies ---
def get_store(request: Request) -> BookStore:
    """Resolve the store the app was constructed with."""
    return request.app.state.store


# --- Helper Functions ---
def _to_book(payload: BookModel) -> Book:
    try:
        return Book.from_dict(payload.model_dump())
    except BookValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


def create_app(store: Optional[BookStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around an explicit store instance."""
    settings = settings or default_settings
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    if store is None:
        store = BookStore(seed=settings.seed_store)

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)
    app.state.store = store

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- API Endpoints ---
    @app.get("/health", response_model=HealthModel)
    async def health(store: BookStore = Depends(get_store)):
        """Lightweight health endpoint reporting the number of stored books."""
        now_iso = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return HealthModel(status="healthy", timestamp=now_iso, total_books=len(store))

    @app.get("/books", response_model=List[BookModel])
    def get_books(store: BookStore = Depends(get_store)):
        """Return every book currently in the store."""
        return [BookModel(**b.to_dict()) for b in store.list_all()]

    @app.post("/books", response_model=int)
    def insert_book(payload: BookModel, store: BookStore = Depends(get_store)):
        """Store a new book and return the id it was given."""
        book = _to_book(payload)
        book_id = store.insert(book)
        logger.info("Added book '%s' as id=%s", book.title, book_id)
        return book_id

    @app.delete("/books/{book_id}", response_model=bool)
    def delete_book(book_id: int = Path(...), store: BookStore = Depends(get_store)):
        """Remove a book; false when it was already gone."""
        removed = store.delete(book_id)
        if not removed:
            logger.info("Delete requested for missing book id=%s", book_id)
        return removed

    @app.put("/books", response_model=bool)
    def update_book(payload: BookModel, store: BookStore = Depends(get_store)):
        """Replace a stored book; false when no book with that id exists."""
        book = _to_book(payload)
        updated = store.update(book)
        if not updated:
            logger.info("Update requested for missing book id=%s", book.book_id)
        return updated

    return app


app = create_app()
