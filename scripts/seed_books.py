"""Seed the books collection with the built-in catalogue.

This script:
1. Validates the catalogue against schemas/book.schema.json
2. Removes every existing record when the collection is not empty
3. Inserts the catalogue in order
4. Reads the records back from the store and lists them

Re-running yields the same final contents. Records added by anything else
are lost on every run.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

import click
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress

from src.catalog import BOOKS, Book, catalogue_documents
from src.logs import configure_logging
from src.store import (
    StoreConfig,
    close_client,
    get_books_collection,
    get_mongo_client,
    verify_connectivity,
)
from src.validators import CatalogueValidationError, ensure_valid

if TYPE_CHECKING:
    from pymongo.collection import Collection

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class SeedingConfig:
    """Configuration for seeding the books collection."""

    store: StoreConfig = field(default_factory=StoreConfig.from_env)
    verbose: bool = False


@dataclass
class SeedingStats:
    """Outcome of one seeding run."""

    existing_count: int = 0
    removed_count: int = 0
    inserted_count: int = 0
    inserted: list[dict[str, Any]] = field(default_factory=list)


def reset_collection(collection: Collection[dict[str, Any]]) -> tuple[int, int]:
    """Remove all records if there are any.

    Returns tuple of (existing_count, removed_count).
    """
    existing = collection.count_documents({})
    if existing == 0:
        return 0, 0

    logger.info(f"Collection already contains {existing} documents, removing them")
    result = collection.delete_many({})
    return existing, result.deleted_count


def insert_catalogue(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book] = BOOKS,
) -> int:
    """Insert ``books`` in order. Returns the inserted count."""
    if not books:
        return 0

    result = collection.insert_many(catalogue_documents(books), ordered=True)
    return len(result.inserted_ids)


def seed_collection(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book] = BOOKS,
) -> SeedingStats:
    """Replace the collection contents with ``books``.

    The catalogue is validated before any write.

    Raises:
        CatalogueValidationError: If a record does not match the schema.
        pymongo.errors.PyMongoError: On any store failure.
    """
    ensure_valid(catalogue_documents(books))

    stats = SeedingStats()
    stats.existing_count, stats.removed_count = reset_collection(collection)
    stats.inserted_count = insert_catalogue(collection, books)

    # Echo from the store, not from memory
    stats.inserted = list(collection.find({}).sort("_id", 1))

    return stats


def format_book_line(index: int, document: dict[str, Any]) -> str:
    """'1. "Title" by Author (1960)'."""
    return (
        f'{index}. "{document.get("title")}" by {document.get("author")} '
        f'({document.get("published_year")})'
    )


@click.command()
@click.option("--uri", type=str, default=None, help="MongoDB connection string (env: MONGO_URI)")
@click.option("--database", type=str, default=None, help="Database name (env: MONGO_DB)")
@click.option(
    "--collection",
    type=str,
    default=None,
    help="Collection name (env: MONGO_COLLECTION)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
def main(
    uri: str | None,
    database: str | None,
    collection: str | None,
    verbose: bool,
) -> None:
    """Seed the books collection with the built-in catalogue."""
    configure_logging(verbose, console)
    config = SeedingConfig(
        store=StoreConfig.from_env().with_overrides(uri, database, collection),
        verbose=verbose,
    )

    console.print("\n[bold blue]Seeding books collection...[/bold blue]\n")

    client = None
    failed = False

    try:
        client = get_mongo_client(config.store)

        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("[green]Seeding...", total=2)

            verify_connectivity(client)
            console.print(f"  ✓ Connected to MongoDB ({config.store.database})")
            progress.update(task, advance=1)

            stats = seed_collection(get_books_collection(client, config.store), BOOKS)
            if stats.existing_count:
                console.print(
                    f"  ✓ Collection already contained {stats.existing_count} documents, "
                    f"removed {stats.removed_count}"
                )
            console.print(
                f"  ✓ {stats.inserted_count} books were successfully inserted into the database"
            )
            progress.update(task, advance=1)

        console.print("\n[bold]Inserted books:[/bold]")
        for index, document in enumerate(stats.inserted, start=1):
            console.print(f"  {format_book_line(index, document)}")

        console.print("\n[bold green]Seeding complete![/bold green]")

    except (PyMongoError, CatalogueValidationError) as e:
        failed = True
        logger.exception("Seeding failed")
        console.print(f"\n[bold red]Error occurred: {escape(str(e))}[/bold red]")

    finally:
        close_client(client)
        console.print("Connection closed")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
