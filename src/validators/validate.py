"""JSON schema validation for book records."""

from __future__ import annotations

import json
from importlib.resources import files
from pathlib import Path
from typing import Any, Iterable

import click
import jsonschema
from rich.console import Console

from src.catalog import catalogue_documents

console = Console()

# Shipped as package data, so it resolves from an installed wheel too
DEFAULT_SCHEMA = files("src.validators") / "schemas" / "book.schema.json"


class CatalogueValidationError(ValueError):
    """Raised when catalogue records do not match the book schema."""

    def __init__(self, errors: dict[int, list[str]]) -> None:
        self.errors = errors
        summary = "; ".join(
            f"record {index}: {', '.join(messages)}"
            for index, messages in sorted(errors.items())
        )
        super().__init__(f"{len(errors)} invalid record(s): {summary}")


def load_schema(schema_path: Path | None = None) -> dict[str, Any]:
    """Load a JSON schema from file, or the packaged book schema."""
    if schema_path is None:
        return json.loads(DEFAULT_SCHEMA.read_text(encoding="utf-8"))
    with open(schema_path, encoding="utf-8") as f:
        return json.load(f)


def validate_record(
    record: dict[str, Any],
    schema: dict[str, Any],
    validator: jsonschema.protocols.Validator | None = None,
) -> list[str]:
    """Validate one record against a schema.

    Args:
        record: Record to check
        schema: JSON schema
        validator: Prebuilt validator for ``schema``, reused across records

    Returns:
        List of validation errors (empty if valid)
    """
    if validator is None:
        validator = jsonschema.Draft202012Validator(schema)
    return [
        error.message
        for error in sorted(validator.iter_errors(record), key=lambda e: list(e.path))
    ]


def validate_records(
    records: Iterable[dict[str, Any]],
    schema: dict[str, Any],
) -> dict[int, list[str]]:
    """Validate many records.

    Returns:
        Dict mapping record position to its validation errors
    """
    validator = jsonschema.Draft202012Validator(schema)
    results: dict[int, list[str]] = {}

    for index, record in enumerate(records):
        errors = validate_record(record, schema, validator)
        if errors:
            results[index] = errors

    return results


def ensure_valid(
    records: Iterable[dict[str, Any]],
    schema: dict[str, Any] | None = None,
) -> None:
    """Raise CatalogueValidationError unless every record is valid."""
    errors = validate_records(records, schema or load_schema())
    if errors:
        raise CatalogueValidationError(errors)


def load_records(file_path: Path) -> list[dict[str, Any]]:
    """Load a JSON file holding a list of book records."""
    with open(file_path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise click.BadParameter(f"{file_path} must contain a JSON list of records")
    return data


@click.command()
@click.argument(
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "--schema",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to JSON schema (default: packaged book schema)",
)
def main(file_path: Path | None, schema: Path | None) -> None:
    """Validate book records (a JSON file, or the built-in catalogue)."""
    source = str(file_path) if file_path else "built-in catalogue"
    console.print(f"[bold blue]Validating {source}...[/bold blue]")

    schema_data = load_schema(schema)
    records = load_records(file_path) if file_path else catalogue_documents()

    results = validate_records(records, schema_data)
    if results:
        for index, errors in sorted(results.items()):
            record = records[index]
            title = record.get("title", "<untitled>") if isinstance(record, dict) else "<not an object>"
            console.print(f"[red]✗ record {index} ({title})[/red]")
            for error in errors:
                console.print(f"    {error}")
        console.print(f"\n[red]{len(results)} record(s) failed validation[/red]")
        raise SystemExit(1)

    console.print(f"[green]✓ All {len(records)} records valid[/green]")


if __name__ == "__main__":
    main()
