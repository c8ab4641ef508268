"""Run the illustrative query set against the books collection.

Steps run strictly in order against shared collection state: the price
update and the delete are visible to every later step. The first failure
aborts the remaining steps.

Run seed_books.py first; this script modifies the collection.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

import click
from bson import json_util
from pymongo.errors import PyMongoError
from rich.console import Console, RenderableType
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from src.logs import configure_logging
from src.queries import (
    average_price_by_genre,
    count_by_decade,
    create_author_year_index,
    create_title_index,
    decade_label,
    delete_by_title,
    explain_title_lookup,
    find_by_author,
    find_by_genre,
    find_in_stock_published_after,
    find_projected,
    find_published_after,
    paginate,
    sorted_by,
    top_author,
    update_price_by_title,
)
from src.store import (
    StoreConfig,
    close_client,
    get_books_collection,
    get_mongo_client,
    verify_connectivity,
)

if TYPE_CHECKING:
    from pymongo.collection import Collection

console = Console()
logger = logging.getLogger(__name__)

GENRE = "Fiction"
PUBLISHED_AFTER = 1950
AUTHOR = "George Orwell"
UPDATE_TITLE = "1984"
UPDATED_PRICE = 12.99
DELETE_TITLE = "Moby Dick"
IN_STOCK_PUBLISHED_AFTER = 2010
PROJECTED_FIELDS = ("title", "author", "price")
PAGE = 1
PAGE_SIZE = 5
EXPLAIN_TITLE = "1984"


def render_records(documents: list[dict[str, Any]]) -> RenderableType:
    """Table of records, one column per field seen (``_id`` hidden)."""
    if not documents:
        return "[dim](no matching books)[/dim]"

    columns: list[str] = []
    for document in documents:
        for key in document:
            if key != "_id" and key not in columns:
                columns.append(key)

    table = Table(show_lines=False)
    for column in columns:
        table.add_column(column, style="cyan" if column == "title" else None)
    for document in documents:
        table.add_row(*(str(document.get(column, "")) for column in columns))

    return table


def render_json(value: Any) -> RenderableType:
    """Pretty JSON (BSON-aware, so ObjectId and friends serialise)."""
    return Syntax(json_util.dumps(value, indent=2), "json", word_wrap=True)


def render_decades(groups: list[dict[str, Any]]) -> RenderableType:
    table = Table()
    table.add_column("decade", style="cyan")
    table.add_column("count", justify="right")
    for group in groups:
        table.add_row(decade_label(group["_id"]), str(group["count"]))
    return table


@dataclass(frozen=True)
class QueryStep:
    """One named request in the query plan.

    Fields:
        name: Heading printed before the result
        run: Issues the request against the collection
        render: Turns the result into something printable
    """
    name: str
    run: Callable[[Collection[dict[str, Any]]], Any]
    render: Callable[[Any], RenderableType] = render_records


def build_query_plan() -> list[QueryStep]:
    """The ordered query set: CRUD, advanced queries, aggregation, indexing."""
    return [
        QueryStep(
            f'Books in the "{GENRE}" genre',
            lambda books: find_by_genre(books, GENRE),
        ),
        QueryStep(
            f"Books published after {PUBLISHED_AFTER}",
            lambda books: find_published_after(books, PUBLISHED_AFTER),
        ),
        QueryStep(
            f"Books by {AUTHOR}",
            lambda books: find_by_author(books, AUTHOR),
        ),
        QueryStep(
            f'Update price for "{UPDATE_TITLE}" to {UPDATED_PRICE}',
            lambda books: update_price_by_title(books, UPDATE_TITLE, UPDATED_PRICE),
            lambda modified: f"{modified} document(s) updated",
        ),
        QueryStep(
            f'Delete "{DELETE_TITLE}"',
            lambda books: delete_by_title(books, DELETE_TITLE),
            lambda deleted: f"{deleted} document(s) removed",
        ),
        QueryStep(
            f"Books in stock and published after {IN_STOCK_PUBLISHED_AFTER}",
            lambda books: find_in_stock_published_after(books, IN_STOCK_PUBLISHED_AFTER),
        ),
        QueryStep(
            "Books with only " + ", ".join(PROJECTED_FIELDS),
            lambda books: find_projected(books, PROJECTED_FIELDS),
        ),
        QueryStep(
            "Books sorted by price (ascending)",
            lambda books: sorted_by(books, "price"),
        ),
        QueryStep(
            "Books sorted by price (descending)",
            lambda books: sorted_by(books, "price", descending=True),
        ),
        QueryStep(
            f"Page {PAGE} of books ({PAGE_SIZE} per page)",
            lambda books: paginate(books, PAGE, PAGE_SIZE),
        ),
        QueryStep(
            "Average book price by genre",
            average_price_by_genre,
            render_json,
        ),
        QueryStep(
            "Author with the most books",
            top_author,
            render_json,
        ),
        QueryStep(
            "Books grouped by publication decade",
            count_by_decade,
            render_decades,
        ),
        QueryStep(
            'Index on "title"',
            create_title_index,
            lambda name: f"⚡ Index created: {name}",
        ),
        QueryStep(
            'Compound index on "author" and "published_year"',
            create_author_year_index,
            lambda name: f"⚡ Compound index created: {name}",
        ),
        QueryStep(
            f'Query execution stats for title search ("{EXPLAIN_TITLE}")',
            lambda books: explain_title_lookup(books, EXPLAIN_TITLE),
            render_json,
        ),
    ]


def run_query_plan(
    collection: Collection[dict[str, Any]],
    steps: list[QueryStep],
    out: Console | None = None,
) -> list[tuple[str, Any]]:
    """Run ``steps`` in order, printing each result.

    Any exception stops the run; no step is retried or skipped.

    Returns:
        List of (step name, raw result) in execution order.
    """
    out = out or console
    results: list[tuple[str, Any]] = []

    for number, step in enumerate(steps, start=1):
        logger.debug(f"Step {number}/{len(steps)}: {step.name}")
        result = step.run(collection)
        results.append((step.name, result))

        out.print(f"\n[bold cyan]{number}. {step.name}[/bold cyan]")
        out.print(step.render(result))

    return results


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
    """Run the query set against the books collection."""
    configure_logging(verbose, console)
    config = StoreConfig.from_env().with_overrides(uri, database, collection)

    client = None
    failed = False

    try:
        client = get_mongo_client(config)
        verify_connectivity(client)
        console.print(f"[bold blue]Connected to MongoDB ({config.database})[/bold blue]")

        run_query_plan(get_books_collection(client, config), build_query_plan())

    except PyMongoError as e:
        failed = True
        logger.exception("Query run aborted")
        console.print(f"\n[bold red]Error: {escape(str(e))}[/bold red]")

    finally:
        close_client(client)
        console.print("\nConnection closed.")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
