"""
Book shelf service.

Handles reading-tracker book CRUD and page progress.
"""

import logging
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import NotFoundException, ValidationException
from sharp.database import collections
from sharp.database.documents import parse_object_id, utcnow

logger = logging.getLogger(__name__)

BOOK_STATUSES = ("want_to_read", "reading", "completed", "abandoned")
EDITABLE_FIELDS = ("title", "author", "isbn", "url", "totalPages", "currentPage", "status")


class BookService:
    """
    Handles book storage and progress tracking.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize BookService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._books_collection = db[collections.BOOKS]

    async def list_books(self, user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get the user's books sorted by status, then most recently added."""
        query: Dict[str, Any] = {"userId": ObjectId(user_id)}
        if status:
            query["status"] = status

        cursor = self._books_collection.find(query).sort([("status", 1), ("dateAdded", -1)])
        return await cursor.to_list(length=None)

    async def get_book(self, user_id: str, book_id: str) -> Dict[str, Any]:
        """
        Get one of the user's books.

        Raises:
            NotFoundException: No such book for this user
        """
        book = await self._books_collection.find_one({
            "_id": parse_object_id(book_id, "Book"),
            "userId": ObjectId(user_id),
        })
        if not book:
            raise NotFoundException(message="Book not found", code="BOOK_NOT_FOUND")
        return book

    async def create_book(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add a book to the user's shelf.

        Raises:
            ValidationException: Title missing
        """
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationException(
                message="Title is required",
                errors=[{"field": "title", "message": "Title is required"}],
            )

        now = utcnow()
        status = data.get("status") or "reading"
        book = {
            "userId": ObjectId(user_id),
            "title": title,
            "author": data.get("author"),
            "isbn": data.get("isbn"),
            "url": data.get("url"),
            "totalPages": data.get("totalPages"),
            "currentPage": 0,
            "status": status,
            "dateAdded": now,
            "dateStarted": now if status == "reading" else None,
            "dateFinished": None,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._books_collection.insert_one(book)
        book["_id"] = result.inserted_id

        logger.info(f"Book {result.inserted_id} added for user {user_id} ({status})")
        return book

    async def update_book(
        self,
        user_id: str,
        book_id: str,
        updates: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Update an owned book. Status changes stamp dateStarted/dateFinished.

        Raises:
            NotFoundException: No such book for this user
        """
        book = await self.get_book(user_id, book_id)

        fields = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS and v is not None}
        now = utcnow()

        status = fields.get("status")
        if status == "reading" and not book.get("dateStarted"):
            fields["dateStarted"] = now
        if status == "completed" and book.get("status") != "completed":
            fields["dateFinished"] = now

        fields["updatedAt"] = now

        return await self._books_collection.find_one_and_update(
            {"_id": book["_id"]},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def advance_progress(self, book: Dict[str, Any], pages_read: int) -> Dict[str, Any]:
        """
        Move the current page forward. Reaching totalPages completes the book.

        Args:
            book: Book document
            pages_read: Pages read in the session

        Returns:
            Updated book document
        """
        current_page = (book.get("currentPage") or 0) + pages_read
        now = utcnow()
        fields: Dict[str, Any] = {"currentPage": current_page, "updatedAt": now}

        total_pages = book.get("totalPages")
        if total_pages and current_page >= total_pages and book.get("status") != "completed":
            fields["status"] = "completed"
            fields["dateFinished"] = now
            logger.info(f"Book {book['_id']} completed")

        return await self._books_collection.find_one_and_update(
            {"_id": book["_id"]},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_book(self, user_id: str, book_id: str) -> None:
        """
        Delete an owned book.

        Raises:
            NotFoundException: No such book for this user
        """
        result = await self._books_collection.delete_one({
            "_id": parse_object_id(book_id, "Book"),
            "userId": ObjectId(user_id),
        })
        if result.deleted_count == 0:
            raise NotFoundException(message="Book not found", code="BOOK_NOT_FOUND")

    async def count_by_status(self, user_id: str) -> Dict[str, int]:
        """Number of the user's books per status."""
        cursor = self._books_collection.aggregate([
            {"$match": {"userId": ObjectId(user_id)}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        ])
        return {row["_id"]: row["count"] for row in await cursor.to_list(length=None)}
