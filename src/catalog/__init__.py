"""Bookstore seed catalogue.

The catalogue is a flat, ordered, immutable sequence of Book records. The
store holds a mutable copy; nothing at runtime changes ``BOOKS`` itself.

Titles are used as a lookup key by the query set but are NOT enforced to be
unique. Updates and deletes by title affect a single arbitrarily chosen
matching record.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Iterable

# Store-assigned identifier, never part of a Book
ID_FIELD = "_id"


@dataclass(frozen=True)
class Book:
    """A single book record.

    Fields:
        title: Display title (non-empty, not unique)
        author: Author name
        genre: Free-form category label
        published_year: Year of first publication (may be pre-modern)
        price: Non-negative price
        in_stock: Availability flag
        pages: Positive page count
        publisher: Original publisher
    """
    title: str
    author: str
    genre: str
    published_year: int
    price: float
    in_stock: bool
    pages: int
    publisher: str

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document (a new dict on every call)."""
        return asdict(self)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Book:
        """Rebuild a Book from a stored document, ignoring ``_id``."""
        return cls(**{name: document[name] for name in BOOK_FIELDS})


BOOK_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Book))


BOOKS: tuple[Book, ...] = (
    Book(
        title="To Kill a Mockingbird",
        author="Harper Lee",
        genre="Fiction",
        published_year=1960,
        price=12.99,
        in_stock=True,
        pages=336,
        publisher="J. B. Lippincott & Co.",
    ),
    Book(
        title="1984",
        author="George Orwell",
        genre="Dystopian",
        published_year=1949,
        price=10.99,
        in_stock=True,
        pages=328,
        publisher="Secker & Warburg",
    ),
    Book(
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        genre="Fiction",
        published_year=1925,
        price=9.99,
        in_stock=True,
        pages=180,
        publisher="Charles Scribner's Sons",
    ),
    Book(
        title="Brave New World",
        author="Aldous Huxley",
        genre="Dystopian",
        published_year=1932,
        price=11.50,
        in_stock=False,
        pages=311,
        publisher="Chatto & Windus",
    ),
    Book(
        title="The Hobbit",
        author="J.R.R. Tolkien",
        genre="Fantasy",
        published_year=1937,
        price=14.99,
        in_stock=True,
        pages=310,
        publisher="George Allen & Unwin",
    ),
    Book(
        title="The Catcher in the Rye",
        author="J.D. Salinger",
        genre="Fiction",
        published_year=1951,
        price=8.99,
        in_stock=True,
        pages=224,
        publisher="Little, Brown and Company",
    ),
    Book(
        title="Pride and Prejudice",
        author="Jane Austen",
        genre="Romance",
        published_year=1813,
        price=7.99,
        in_stock=True,
        pages=432,
        publisher="T. Egerton, Whitehall",
    ),
    Book(
        title="The Lord of the Rings",
        author="J.R.R. Tolkien",
        genre="Fantasy",
        published_year=1954,
        price=19.99,
        in_stock=True,
        pages=1178,
        publisher="Allen & Unwin",
    ),
    Book(
        title="Animal Farm",
        author="George Orwell",
        genre="Political Satire",
        published_year=1945,
        price=8.50,
        in_stock=False,
        pages=112,
        publisher="Secker & Warburg",
    ),
    Book(
        title="The Alchemist",
        author="Paulo Coelho",
        genre="Fiction",
        published_year=1988,
        price=10.99,
        in_stock=True,
        pages=197,
        publisher="HarperOne",
    ),
    Book(
        title="Moby Dick",
        author="Herman Melville",
        genre="Adventure",
        published_year=1851,
        price=12.50,
        in_stock=False,
        pages=635,
        publisher="Harper & Brothers",
    ),
    Book(
        title="Wuthering Heights",
        author="Emily Brontë",
        genre="Gothic Fiction",
        published_year=1847,
        price=9.99,
        in_stock=True,
        pages=342,
        publisher="Thomas Cautley Newby",
    ),
    Book(
        title="The Picture of Dorian Gray",
        author="Oscar Wilde",
        genre="Philosophical Fiction",
        published_year=1890,
        price=11.99,
        in_stock=True,
        pages=254,
        publisher="Lippincott's Monthly Magazine",
    ),
    Book(
        title="The Brothers Karamazov",
        author="Fyodor Dostoevsky",
        genre="Philosophical Fiction",
        published_year=1880,
        price=14.99,
        in_stock=True,
        pages=796,
        publisher="The Russian Messenger",
    ),
    Book(
        title="The Idiot",
        author="Fyodor Dostoevsky",
        genre="Philosophical Fiction",
        published_year=1869,
        price=13.99,
        in_stock=True,
        pages=656,
        publisher="The Russian Messenger",
    ),
    Book(
        title="Crime and Punishment",
        author="Fyodor Dostoevsky",
        genre="Philosophical Fiction",
        published_year=1866,
        price=15.99,
        in_stock=True,
        pages=671,
        publisher="The Russian Messenger",
    ),
    Book(
        title="Les Misérables",
        author="Victor Hugo",
        genre="Historical Fiction",
        published_year=1862,
        price=18.99,
        in_stock=True,
        pages=1232,
        publisher="A. Lacroix, Verboeckhoven & Cie",
    ),
    Book(
        title="War and Peace",
        author="Leo Tolstoy",
        genre="Historical Fiction",
        published_year=1869,
        price=19.99,
        in_stock=True,
        pages=1225,
        publisher="The Russian Messenger",
    ),
    Book(
        title="Anna Karenina",
        author="Leo Tolstoy",
        genre="Historical Fiction",
        published_year=1877,
        price=18.99,
        in_stock=True,
        pages=864,
        publisher="The Russian Messenger",
    ),
    Book(
        title="Don Quixote",
        author="Miguel de Cervantes",
        genre="Adventure",
        published_year=1605,
        price=16.99,
        in_stock=True,
        pages=863,
        publisher="Francisco de Robles",
    ),
)


def catalogue_documents(books: Iterable[Book] = BOOKS) -> list[dict[str, Any]]:
    """Return fresh store documents for ``books``, preserving order.

    pymongo's insert_many adds ``_id`` to the dicts it is given, so callers
    get new dicts each time and the catalogue stays untouched.
    """
    return [book.to_document() for book in books]


__all__ = [
    "BOOKS",
    "BOOK_FIELDS",
    "ID_FIELD",
    "Book",
    "catalogue_documents",
]
