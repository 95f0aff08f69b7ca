"""
FastAPI router for the reading tracker book shelf.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from sharp.dependencies import get_book_service, require_auth
from sharp.pipelines import reading as pipelines
from sharp.schemas.reading import BookCreateRequest, BookStatus, BookUpdateRequest
from sharp.services.reading.book_service import BookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])


@router.get("")
async def list_books(
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
    status: Optional[BookStatus] = Query(None),
):
    books = await pipelines.list_books_pipeline(book_service, str(user["_id"]), status)
    return success_response(books)


@router.post("", status_code=201)
async def create_book(
    body: BookCreateRequest,
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
):
    """Add a book. Status defaults to reading."""
    book = await pipelines.create_book_pipeline(
        book_service, str(user["_id"]), body.model_dump(exclude_none=True)
    )
    return success_response(book, "Book added")


@router.put("/{book_id}")
async def update_book(
    book_id: str,
    body: BookUpdateRequest,
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
):
    book = await pipelines.update_book_pipeline(
        book_service=book_service,
        user_id=str(user["_id"]),
        book_id=book_id,
        updates=body.model_dump(exclude_none=True),
    )
    return success_response(book, "Book updated")


@router.delete("/{book_id}")
async def delete_book(
    book_id: str,
    user: Annotated[dict, Depends(require_auth)],
    book_service: Annotated[BookService, Depends(get_book_service)],
):
    await pipelines.delete_book_pipeline(book_service, str(user["_id"]), book_id)
    return success_response(message="Book deleted")
