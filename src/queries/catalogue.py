"""Read-mostly operations against the books collection.

Each function issues one request through the given collection handle and
returns plain Python values. Store errors (pymongo.errors.PyMongoError)
propagate untranslated.

Title lookups:
    Title is not unique. ``update_price_by_title`` and ``delete_by_title``
    use update_one/delete_one, so they touch at most one arbitrarily chosen
    match. No uniqueness constraint is created.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from pymongo import ASCENDING, DESCENDING

if TYPE_CHECKING:
    from pymongo.collection import Collection

logger = logging.getLogger(__name__)

Document = dict[str, Any]
SortSpec = Sequence[tuple[str, int]]

TITLE_FIELD = "title"
AUTHOR_FIELD = "author"
GENRE_FIELD = "genre"
PRICE_FIELD = "price"
YEAR_FIELD = "published_year"
IN_STOCK_FIELD = "in_stock"


# ============================================================================
# Filters
# ============================================================================


def find_by_field(
    collection: Collection[Document],
    field: str,
    value: Any,
) -> list[Document]:
    """Equality filter on one field. Result order is unspecified."""
    return list(collection.find({field: value}))


def find_by_genre(collection: Collection[Document], genre: str) -> list[Document]:
    return find_by_field(collection, GENRE_FIELD, genre)


def find_by_author(collection: Collection[Document], author: str) -> list[Document]:
    return find_by_field(collection, AUTHOR_FIELD, author)


def find_by_title(collection: Collection[Document], title: str) -> list[Document]:
    return find_by_field(collection, TITLE_FIELD, title)


def find_published_after(collection: Collection[Document], year: int) -> list[Document]:
    """Books with published_year strictly greater than ``year``."""
    return list(collection.find({YEAR_FIELD: {"$gt": year}}))


def find_in_stock_published_after(
    collection: Collection[Document],
    year: int,
) -> list[Document]:
    """Books in stock AND published strictly after ``year``."""
    return list(collection.find({IN_STOCK_FIELD: True, YEAR_FIELD: {"$gt": year}}))


def find_projected(
    collection: Collection[Document],
    fields: Sequence[str],
) -> list[Document]:
    """All books, only ``fields`` returned and ``_id`` suppressed."""
    projection: dict[str, int] = {"_id": 0}
    projection.update({name: 1 for name in fields})
    return list(collection.find({}, projection))


# ============================================================================
# Point writes
# ============================================================================


def update_price_by_title(
    collection: Collection[Document],
    title: str,
    price: float,
) -> int:
    """Set the price of one book with this exact title.

    Returns:
        Number of documents modified (0 if no match or price unchanged).
    """
    result = collection.update_one({TITLE_FIELD: title}, {"$set": {PRICE_FIELD: price}})
    logger.debug(f"update_one title={title!r}: matched={result.matched_count}")
    return result.modified_count


def delete_by_title(collection: Collection[Document], title: str) -> int:
    """Delete one book with this exact title.

    Returns:
        Number of documents removed (0 or 1).
    """
    result = collection.delete_one({TITLE_FIELD: title})
    return result.deleted_count


# ============================================================================
# Sorting and pagination
# ============================================================================


def sorted_by(
    collection: Collection[Document],
    field: str,
    descending: bool = False,
) -> list[Document]:
    """Full scan ordered by ``field``."""
    direction = DESCENDING if descending else ASCENDING
    return list(collection.find({}).sort(field, direction))


def paginate(
    collection: Collection[Document],
    page: int,
    page_size: int,
    sort: SortSpec | None = None,
) -> list[Document]:
    """Return page ``page`` (1-based) of ``page_size`` books.

    Without ``sort`` the store gives no ordering guarantee, so the same page
    may hold different books across calls. Pass a sort when that matters.

    Raises:
        ValueError: If page or page_size is below 1.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    cursor = collection.find({})
    if sort:
        cursor = cursor.sort(list(sort))
    else:
        logger.warning("Paginating without a sort: page contents are not stable across calls")

    return list(cursor.skip((page - 1) * page_size).limit(page_size))


# ============================================================================
# Aggregation pipelines
# ============================================================================


def average_key(value_field: str) -> str:
    """Output key for the mean of ``value_field``: 'price' -> 'avgPrice'."""
    return "avg" + "".join(part.title() for part in value_field.split("_"))


def average_by_pipeline(group_field: str, value_field: str) -> list[Document]:
    """Group by ``group_field``, mean of ``value_field``, highest mean first.

    The mean is stored under ``average_key(value_field)``.
    """
    key = average_key(value_field)
    return [
        {"$group": {"_id": f"${group_field}", key: {"$avg": f"${value_field}"}}},
        {"$sort": {key: -1}},
    ]


def count_by_pipeline(group_field: str) -> list[Document]:
    """Group by ``group_field`` and count members, largest group first."""
    return [
        {"$group": {"_id": f"${group_field}", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
    ]


def top_group_by_count_pipeline(group_field: str) -> list[Document]:
    """Group by ``group_field`` and keep the single largest group.

    Ties for the maximum count are not broken deliberately: whichever group
    the store sorts first is returned.
    """
    return count_by_pipeline(group_field) + [{"$limit": 1}]


def count_by_decade_pipeline(year_field: str = YEAR_FIELD) -> list[Document]:
    """Count books per decade (floor(year / 10) * 10), oldest decade first.

    The decade is kept numeric so it sorts chronologically; ``decade_label``
    renders it for display.
    """
    return [
        {
            "$project": {
                "decade": {
                    "$multiply": [{"$floor": {"$divide": [f"${year_field}", 10]}}, 10],
                },
            },
        },
        {"$group": {"_id": "$decade", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]


def decade_label(decade: int | float) -> str:
    """1860 -> '1860s'."""
    return f"{int(decade)}s"


def average_price_by_genre(collection: Collection[Document]) -> list[Document]:
    return list(collection.aggregate(average_by_pipeline(GENRE_FIELD, PRICE_FIELD)))


def top_author(collection: Collection[Document]) -> list[Document]:
    """Author with the most books, as a one-element list (empty if no books)."""
    return list(collection.aggregate(top_group_by_count_pipeline(AUTHOR_FIELD)))


def count_by_genre(collection: Collection[Document]) -> list[Document]:
    """Books per genre, largest genre first."""
    return list(collection.aggregate(count_by_pipeline(GENRE_FIELD)))


def count_by_decade(collection: Collection[Document]) -> list[Document]:
    return list(collection.aggregate(count_by_decade_pipeline()))


# ============================================================================
# Indexes and diagnostics
# ============================================================================


def create_title_index(collection: Collection[Document]) -> str:
    """Ascending index on title. Returns the index name."""
    return collection.create_index([(TITLE_FIELD, ASCENDING)])


def create_author_year_index(collection: Collection[Document]) -> str:
    """Compound ascending index on (author, published_year)."""
    return collection.create_index([(AUTHOR_FIELD, ASCENDING), (YEAR_FIELD, ASCENDING)])


def explain_title_lookup(collection: Collection[Document], title: str) -> Document:
    """Execution statistics for a find by exact title.

    Informational only; the shape is whatever the server reports.
    """
    plan = collection.database.command(
        "explain",
        {"find": collection.name, "filter": {TITLE_FIELD: title}},
        verbosity="executionStats",
    )
    return plan.get("executionStats", {})
