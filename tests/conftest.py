"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.models import BookCreate
from api.store import BookStore


@pytest.fixture
def client():
    """Create a test client with a fresh, empty book store."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def book_store():
    """Create an empty book store."""
    return BookStore()


@pytest.fixture
def sample_book_payload():
    """Sample request body for creating a book."""
    return {
        "name": "Dune",
        "description": "Sci-fi",
        "content": "A desert planet and the spice that binds an empire."
    }


@pytest.fixture
def sample_book_create(sample_book_payload):
    """Validated creation payload for store tests."""
    return BookCreate(**sample_book_payload)
