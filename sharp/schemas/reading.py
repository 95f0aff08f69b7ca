"""
Pydantic models for the reading tracker.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field


BookStatus = Literal["want_to_read", "reading", "completed", "abandoned"]


class BookCreateRequest(BaseModel):
    """Request body for adding a book. Title is checked by the book service."""
    title: Optional[str] = Field(None, max_length=300)
    author: Optional[str] = Field(None, max_length=200)
    isbn: Optional[str] = Field(None, max_length=20)
    url: Optional[str] = None
    totalPages: Optional[int] = Field(None, gt=0)
    status: Optional[BookStatus] = None


class BookUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    author: Optional[str] = Field(None, max_length=200)
    isbn: Optional[str] = Field(None, max_length=20)
    url: Optional[str] = None
    totalPages: Optional[int] = Field(None, gt=0)
    currentPage: Optional[int] = Field(None, ge=0)
    status: Optional[BookStatus] = None


class ReadingSessionRequest(BaseModel):
    """Request body for logging a reading session."""
    bookId: str
    minutes: int = Field(..., gt=0)
    pagesRead: int = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=1000)
