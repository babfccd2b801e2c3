"""
FastAPI main application for the Book Store API.
"""

import json
import re
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Type

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config
from api.models import (
    BookCreate, BookCreatedResponse, BookUpdate,
    ErrorResponse, MessageResponse
)
from api.store import BookStore
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

# Global book store, created on startup
book_store: Optional[BookStore] = None

_BOOK_ID_PATTERN = re.compile(r"\s*([+-]?)([0-9]+)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )
    logger.info("Starting Book Store API", host=config.host, port=config.port)

    global book_store
    book_store = BookStore()

    yield

    # Shutdown
    logger.info("Shutting down Book Store API", total_books=await book_store.count())
    book_store = None


# Create FastAPI application. Interactive docs only exist in debug mode.
app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=config.api_version,
    openapi_url="/openapi.json" if config.debug else None,
    redirect_slashes=False,
    lifespan=lifespan
)


def _error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers
    )


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, including unmatched routes."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        # Known path, unsupported method: reported like any unknown route.
        return _error_response(status.HTTP_404_NOT_FOUND, "Not Found")
    return _error_response(exc.status_code, exc.detail, headers=exc.headers)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Dependencies
def get_book_store() -> BookStore:
    """Return the running book store."""
    if book_store is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Book store not available"
        )
    return book_store


async def read_json_body(request: Request) -> Any:
    """
    Buffer the whole request body and decode it as JSON.

    Raises:
        HTTPException: 400 with the decoder's reason if the body is not JSON
    """
    body = await request.body()
    try:
        return json.loads(body)
    except ValueError as e:
        reason = e.msg if isinstance(e, json.JSONDecodeError) else str(e)
        logger.info("Rejected malformed body", path=request.url.path, reason=reason)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid JSON: {reason}"
        )


def parse_book_id(book_id: str) -> int:
    """
    Parse the leading integer of a book id path segment.

    Leading whitespace and a sign are allowed and anything after the digits
    is ignored, so ``"12abc"`` and ``"12.5"`` both read as 12.

    Raises:
        HTTPException: 400 if the segment does not start with an integer
    """
    match = _BOOK_ID_PATTERN.match(book_id)
    if match:
        sign, digits = match.groups()
        try:
            value = int(digits.lstrip("0") or "0")
        except ValueError:
            # Longer than int() will convert; no stored id is that large.
            logger.info("Rejected oversized book id", digits=len(digits))
        else:
            return -value if sign == "-" else value

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid ID"
    )


def validate_payload(payload: Any, model: Type[BaseModel], missing_message: str) -> BaseModel:
    """
    Check required fields on a decoded body, then build the request model.

    Absent, null and empty values all count as missing. A JSON value that is
    not an object carries no fields at all.

    Raises:
        HTTPException: 400 for missing fields or fields of the wrong type
    """
    if not isinstance(payload, dict):
        payload = {}

    missing = [field for field in model.required_fields if not payload.get(field)]
    if missing:
        logger.info("Rejected book payload", missing_fields=missing)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=missing_message
        )

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.info("Rejected book payload", errors=e.error_count())
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid field types"
        )


# Books endpoints
@app.get("/books", tags=["Books"])
async def get_books(store: BookStore = Depends(get_book_store)):
    """Get all books in the order they were created."""
    books = await store.list_books()
    return JSONResponse(content=[book.model_dump() for book in books])


@app.get("/books/{name}", tags=["Books"])
async def get_book(name: str, store: BookStore = Depends(get_book_store)):
    """
    Get a single book by name.

    - **name**: Book name, matched case-insensitively. The first match wins.
    """
    book = await store.get_book_by_name(name)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    return JSONResponse(content=book.model_dump())


@app.post("/books", tags=["Books"])
async def create_book(request: Request, store: BookStore = Depends(get_book_store)):
    """
    Create a book.

    The body must be a JSON object with non-empty **name**, **description**
    and **content**.
    """
    payload = await read_json_body(request)
    data = validate_payload(payload, BookCreate, "Missing required fields")

    book = await store.create_book(data)
    logger.info("Book created", book_id=book.id, name=book.name)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=BookCreatedResponse(book=book).model_dump()
    )


@app.put("/books/{book_id}", tags=["Books"])
async def update_book(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    """
    Replace the name and content of a book.

    - **book_id**: Integer book id

    The description is fixed at creation and cannot be changed.
    """
    parsed_id = parse_book_id(book_id)
    payload = await read_json_body(request)
    data = validate_payload(payload, BookUpdate, "Missing name or content")

    book = await store.update_book(parsed_id, data)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    logger.info("Book updated", book_id=book.id)
    return JSONResponse(content=book.model_dump())


@app.delete("/books/{book_id}", tags=["Books"])
async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """
    Delete a book.

    - **book_id**: Integer book id
    """
    parsed_id = parse_book_id(book_id)

    if not await store.delete_book(parsed_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    logger.info("Book deleted", book_id=parsed_id, total_books=await store.count())
    return JSONResponse(content=MessageResponse(message="Book deleted").model_dump())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
