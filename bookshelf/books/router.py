"""
Route definitions for the book collection.

Endpoints:
- GET    /books            : every stored book
- GET    /books/available  : books whose ``available`` flag is true
- POST   /books            : create a book (id assigned by the store)
- PUT    /books/{book_id}  : partial update
- DELETE /books/{book_id}  : remove a book

Each handler performs one full ``load()`` and, for mutations, one full
``save()``. Handlers are plain ``def`` functions so FastAPI runs the
blocking file I/O in its thread pool.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..models import (
    Book,
    InvalidBookRequest,
    parse_book_id,
    parse_create_request,
    parse_update_request,
)
from ..storage import BookStore, decode_json


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

READ_FAILED = "Failed to read books."
CREATE_FAILED = "Failed to create book."
UPDATE_FAILED = "Failed to update book."
DELETE_FAILED = "Failed to delete book."
NOT_FOUND = "Book not found."


def get_store(request: Request) -> BookStore:
    return request.app.state.store


async def read_json_body(request: Request) -> Any:
    """Decode the request body, yielding ``None`` when it is absent or not JSON.

    Only ``application/json`` bodies are decoded; any other content type is
    treated as no body at all. Validation of the decoded value is left to the
    handlers so that a bad body produces the endpoint's own 400 message
    instead of FastAPI's 422.
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != "application/json":
        return None
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return decode_json(raw)
    except ValueError:
        return None


@contextmanager
def _storage_errors(detail: str) -> Iterator[None]:
    """Turn storage and serialization failures into a static 500."""
    try:
        yield
    except (OSError, TypeError, ValueError) as exc:
        logger.exception("Storage failure: %s", detail)
        raise HTTPException(status_code=500, detail=detail) from exc


def _parse_id(raw: str) -> int:
    try:
        return parse_book_id(raw)
    except InvalidBookRequest as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("", response_model=None, responses={200: {"model": List[Book]}})
def list_books(store: BookStore = Depends(get_store)) -> Any:
    with _storage_errors(READ_FAILED):
        return store.load()


@router.get("/available", response_model=None, responses={200: {"model": List[Book]}})
def list_available_books(store: BookStore = Depends(get_store)) -> Any:
    with _storage_errors(READ_FAILED):
        books = store.load()
    return [b for b in books if isinstance(b, dict) and b.get("available") is True]


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: Any = Depends(read_json_body),
    store: BookStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        req = parse_create_request(payload)
    except InvalidBookRequest as e:
        raise HTTPException(status_code=400, detail=e.message)

    with store.lock, _storage_errors(CREATE_FAILED):
        books = store.load()
        book = {"id": store.next_id(books), **req.model_dump()}
        books.append(book)
        store.save(books)

    logger.info("Created book %s", book["id"])
    return book


@router.put("/{book_id}", response_model=None, responses={200: {"model": Book}})
def update_book(
    book_id: str,
    payload: Any = Depends(read_json_body),
    store: BookStore = Depends(get_store),
) -> Dict[str, Any]:
    bid = _parse_id(book_id)
    try:
        changes = parse_update_request(payload).model_dump(exclude_unset=True)
    except InvalidBookRequest as e:
        raise HTTPException(status_code=400, detail=e.message)

    with store.lock, _storage_errors(UPDATE_FAILED):
        books = store.load()
        idx = store.find_index(books, bid)
        if idx is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        updated = {**books[idx], **changes}
        books[idx] = updated
        store.save(books)

    logger.info("Updated book %s (%s)", bid, ", ".join(sorted(changes)))
    return updated


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(book_id: str, store: BookStore = Depends(get_store)) -> Response:
    bid = _parse_id(book_id)

    with store.lock, _storage_errors(DELETE_FAILED):
        books = store.load()
        if store.find_index(books, bid) is None:
            raise HTTPException(status_code=404, detail=NOT_FOUND)
        store.save(store.without(books, bid))

    logger.info("Deleted book %s", bid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
