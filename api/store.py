"""
In-memory storage layer for the Book Store API.
"""

import asyncio
from typing import List, Optional

import structlog

from api.models import BookCreate, BookResponse, BookUpdate

logger = structlog.get_logger(__name__)


class BookStore:
    """
    Ordered, process-wide collection of books.

    Ids come from a counter that starts at 1 and is never rewound, so an id
    is not reused after its book is deleted. All access goes through a single
    lock so the list and the counter always change together.
    """

    def __init__(self):
        self._books: List[BookResponse] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def list_books(self) -> List[BookResponse]:
        """Return a snapshot of all books in insertion order."""
        async with self._lock:
            return [book.model_copy() for book in self._books]

    async def count(self) -> int:
        """Number of books currently stored."""
        async with self._lock:
            return len(self._books)

    async def get_book_by_name(self, name: str) -> Optional[BookResponse]:
        """
        Find the first book whose name matches, ignoring case.

        Args:
            name: Decoded book name from the request path

        Returns:
            The matching book, or None if nothing matches
        """
        wanted = name.lower()
        async with self._lock:
            for book in self._books:
                if book.name.lower() == wanted:
                    return book.model_copy()
        return None

    async def get_book_by_id(self, book_id: int) -> Optional[BookResponse]:
        """Return a copy of the book with this id, or None."""
        async with self._lock:
            book = self._find(book_id)
            return book.model_copy() if book is not None else None

    async def create_book(self, data: BookCreate) -> BookResponse:
        """
        Append a new book and assign it the next id.

        Args:
            data: Validated creation payload

        Returns:
            The stored book
        """
        async with self._lock:
            book = BookResponse(
                id=self._next_id,
                name=data.name,
                description=data.description,
                content=data.content
            )
            self._next_id += 1
            self._books.append(book)
            total = len(self._books)

        logger.debug("Book stored", book_id=book.id, total_books=total)
        return book.model_copy()

    async def update_book(self, book_id: int, data: BookUpdate) -> Optional[BookResponse]:
        """
        Overwrite name and content of an existing book in place.

        Description and id are never touched.

        Returns:
            The updated book, or None if no book has this id
        """
        async with self._lock:
            book = self._find(book_id)
            if book is None:
                return None
            book.name = data.name
            book.content = data.content
            return book.model_copy()

    async def delete_book(self, book_id: int) -> bool:
        """Remove a book, keeping the order of the rest. Returns False if absent."""
        async with self._lock:
            for index, book in enumerate(self._books):
                if book.id == book_id:
                    del self._books[index]
                    return True
        return False

    def _find(self, book_id: int) -> Optional[BookResponse]:
        # Caller must hold the lock.
        for book in self._books:
            if book.id == book_id:
                return book
        return None
