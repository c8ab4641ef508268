"""Pytest configuration and fixtures for the bookstore scripts."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import mongomock
import pytest

from src.catalog import BOOKS, Book, catalogue_documents

TEST_DATABASE = "plp_bookstore_test"
TEST_COLLECTION = "books"

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def schemas_dir(project_root: Path) -> Path:
    """Return the packaged schemas directory."""
    return project_root / "src" / "validators" / "schemas"


@pytest.fixture
def scripts_dir(project_root: Path) -> Path:
    """Return the scripts directory."""
    return project_root / "scripts"


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_book() -> Book:
    """Return a single valid book for testing."""
    return Book(
        title="Test Book",
        author="Test Author",
        genre="Testing",
        published_year=2024,
        price=1.5,
        in_stock=True,
        pages=42,
        publisher="Test Publisher",
    )


@pytest.fixture
def sample_book_document(sample_book: Book) -> dict[str, Any]:
    """Return the store document for sample_book."""
    return sample_book.to_document()


# ============================================================================
# Store Fixtures (in-memory, no server needed)
# ============================================================================


@pytest.fixture
def mongo_client() -> Generator[mongomock.MongoClient, None, None]:
    """In-memory stand-in for pymongo.MongoClient."""
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture
def books_collection(mongo_client: mongomock.MongoClient) -> Any:
    """Empty books collection."""
    return mongo_client[TEST_DATABASE][TEST_COLLECTION]


@pytest.fixture
def seeded_collection(books_collection: Any) -> Any:
    """Books collection holding exactly the catalogue."""
    books_collection.insert_many(catalogue_documents(BOOKS))
    return books_collection


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (deselect with '-m \"not integration\"')",
    )
    config.addinivalue_line(
        "markers",
        "requires_mongo: marks tests requiring a MongoDB connection",
    )
