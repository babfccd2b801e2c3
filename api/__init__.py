"""
FastAPI RESTful API for the Book Store.

This package provides a small REST API for:
- Creating, listing and looking up books
- Updating and deleting books by id
- Keeping the book collection in process memory
"""
