"""
API models and schemas for the Book Store application.
"""

from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, Field


class BookResponse(BaseModel):
    """Book record as returned by the API."""
    id: int = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    description: str = Field(..., description="Book description")
    content: str = Field(..., description="Book content")


class BookCreate(BaseModel):
    """Request body for creating a book."""
    required_fields: ClassVar[Tuple[str, ...]] = ("name", "description", "content")

    name: Optional[str] = Field(None, description="Book title")
    description: Optional[str] = Field(None, description="Book description")
    content: Optional[str] = Field(None, description="Book content")

    model_config = {"extra": "ignore"}


class BookUpdate(BaseModel):
    """Request body for updating a book. Only name and content can change."""
    required_fields: ClassVar[Tuple[str, ...]] = ("name", "content")

    name: Optional[str] = Field(None, description="New book title")
    content: Optional[str] = Field(None, description="New book content")

    model_config = {"extra": "ignore"}


class BookCreatedResponse(BaseModel):
    """Response model for a newly created book."""
    message: str = Field("Book created", description="Confirmation message")
    book: BookResponse = Field(..., description="The created book")


class MessageResponse(BaseModel):
    """Plain confirmation response."""
    message: str = Field(..., description="Confirmation message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
