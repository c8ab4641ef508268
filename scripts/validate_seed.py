"""Validate the books collection against the built-in catalogue.

This script checks, straight after seed_books.py:
1. Count invariant: number of stored records equals catalogue length
2. Round-trip: every catalogue record is found by title with identical fields
3. No extra records: every stored title belongs to the catalogue

run_queries.py updates and deletes records, so validation fails after it.
"""

from __future__ import annotations

import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

import click
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.catalog import BOOK_FIELDS, BOOKS, Book
from src.logs import configure_logging
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


@dataclass
class ValidationResult:
    """Result of a validation check."""

    name: str
    expected: int | None
    actual: int
    passed: bool
    message: str = ""


@dataclass
class ValidationReport:
    """Complete validation report."""

    counts: list[ValidationResult] = field(default_factory=list)
    records: list[ValidationResult] = field(default_factory=list)

    @property
    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(r.passed for r in self.counts + self.records)

    @property
    def failures(self) -> list[ValidationResult]:
        """Get all failed validations."""
        return [r for r in self.counts + self.records if not r.passed]


def validate_count(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book],
) -> ValidationResult:
    """Stored record count must equal the catalogue length."""
    actual = collection.count_documents({})
    expected = len(books)

    return ValidationResult(
        name="Record count",
        expected=expected,
        actual=actual,
        passed=actual == expected,
        message="" if actual == expected else f"expected {expected}, found {actual}",
    )


def _field_differences(book: Book, document: dict[str, Any]) -> list[str]:
    expected = book.to_document()
    return [
        name
        for name in BOOK_FIELDS
        if name not in document or document[name] != expected[name]
    ]


def validate_round_trip(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book],
) -> list[ValidationResult]:
    """Each catalogue record must be recoverable by title, field for field.

    Titles are not unique in general, so a record passes when any stored
    document with its title matches all of its fields.
    """
    results = []
    expected_per_title = Counter(book.title for book in books)

    for book in books:
        stored = list(collection.find({"title": book.title}))
        differences = [_field_differences(book, document) for document in stored]
        matched = any(not diff for diff in differences)

        if not stored:
            message = "not found"
        elif matched:
            message = ""
        else:
            message = "differs in: " + ", ".join(sorted(set().union(*differences)))

        results.append(ValidationResult(
            name=f"Round-trip: {book.title}",
            expected=expected_per_title[book.title],
            actual=len(stored),
            passed=matched,
            message=message,
        ))

    return results


def validate_no_extra_titles(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book],
) -> ValidationResult:
    """Every stored title must belong to the catalogue."""
    known = {book.title for book in books}
    extra = sorted(
        title for title in collection.distinct("title") if title not in known
    )

    return ValidationResult(
        name="Titles outside catalogue",
        expected=0,
        actual=len(extra),
        passed=not extra,
        message=", ".join(extra),
    )


def run_full_validation(
    collection: Collection[dict[str, Any]],
    books: Sequence[Book] = BOOKS,
) -> ValidationReport:
    """Run full validation and return report."""
    report = ValidationReport()

    report.counts.append(validate_count(collection, books))
    report.counts.append(validate_no_extra_titles(collection, books))
    report.records.extend(validate_round_trip(collection, books))

    return report


def print_report(report: ValidationReport, verbose: bool = False) -> None:
    """Render the report as rich tables."""
    table = Table(title="Books Collection")
    table.add_column("Check", style="cyan")
    table.add_column("Expected", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Status", justify="center")

    for result in report.counts:
        status = "✓" if result.passed else "✗"
        color = "green" if result.passed else "red"
        status_text = f"[{color}]{status}[/{color}]"
        if result.message:
            status_text += f" {result.message}"
        expected = "-" if result.expected is None else str(result.expected)
        table.add_row(result.name, expected, str(result.actual), status_text)

    console.print(table)
    console.print()

    # Per-record rows only in verbose mode, or when something failed
    rows = [r for r in report.records if verbose or not r.passed]
    if rows:
        table = Table(title="Round-trip by Title")
        table.add_column("Record", style="cyan")
        table.add_column("Found", justify="right")
        table.add_column("Status", justify="center")

        for result in rows:
            status = "✓" if result.passed else "✗"
            color = "green" if result.passed else "yellow"
            status_text = f"[{color}]{status}[/{color}]"
            if result.message:
                status_text += f" {result.message}"
            table.add_row(result.name, str(result.actual), status_text)

        console.print(table)
        console.print()

    if report.all_passed:
        console.print("[bold green]✓ All validations passed![/bold green]\n")
    else:
        console.print("[bold yellow]⚠ Some validations failed:[/bold yellow]")
        for failure in report.failures:
            console.print(f"  - {failure.name}: {failure.message or 'Failed'}")
        console.print()


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
    help="Show every per-record check",
)
def main(
    uri: str | None,
    database: str | None,
    collection: str | None,
    verbose: bool,
) -> None:
    """Validate books collection seed integrity."""
    configure_logging(verbose, console)
    config = StoreConfig.from_env().with_overrides(uri, database, collection)

    console.print("\n[bold blue]Validating seed integrity...[/bold blue]\n")

    client = None
    passed = False

    try:
        client = get_mongo_client(config)
        verify_connectivity(client)

        report = run_full_validation(get_books_collection(client, config))
        print_report(report, verbose)
        passed = report.all_passed

    except PyMongoError as e:
        logger.exception("Validation aborted")
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")

    finally:
        close_client(client)
        console.print("Connection closed")

    if not passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
