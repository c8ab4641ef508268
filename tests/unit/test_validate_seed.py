"""Unit tests for the seed integrity check (scripts/validate_seed.py)."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from scripts.validate_seed import (
    ValidationReport,
    ValidationResult,
    main,
    run_full_validation,
    validate_count,
    validate_no_extra_titles,
    validate_round_trip,
)
from src.catalog import BOOKS


class TestValidationReport:
    """Tests for ValidationReport."""

    def test_all_passed_when_empty(self) -> None:
        assert ValidationReport().all_passed

    def test_failures(self) -> None:
        ok = ValidationResult(name="a", expected=1, actual=1, passed=True)
        bad = ValidationResult(name="b", expected=1, actual=0, passed=False)
        report = ValidationReport(counts=[ok], records=[bad])

        assert not report.all_passed
        assert report.failures == [bad]


class TestChecks:
    """Tests for the individual checks."""

    def test_seeded_collection_passes(self, seeded_collection: Any) -> None:
        report = run_full_validation(seeded_collection)
        assert report.all_passed, report.failures
        assert len(report.records) == len(BOOKS)

    def test_count_mismatch(self, seeded_collection: Any) -> None:
        seeded_collection.delete_one({"title": "Moby Dick"})

        result = validate_count(seeded_collection, BOOKS)

        assert not result.passed
        assert result.actual == len(BOOKS) - 1

    def test_missing_record(self, seeded_collection: Any) -> None:
        seeded_collection.delete_one({"title": "Moby Dick"})

        failed = [r for r in validate_round_trip(seeded_collection, BOOKS) if not r.passed]

        assert [r.name for r in failed] == ["Round-trip: Moby Dick"]
        assert failed[0].message == "not found"

    def test_changed_field(self, seeded_collection: Any) -> None:
        seeded_collection.update_one({"title": "1984"}, {"$set": {"price": 12.99}})

        failed = [r for r in validate_round_trip(seeded_collection, BOOKS) if not r.passed]

        assert len(failed) == 1
        assert failed[0].message == "differs in: price"

    def test_extra_title(self, seeded_collection: Any) -> None:
        seeded_collection.insert_one({"title": "Stray"})

        result = validate_no_extra_titles(seeded_collection, BOOKS)

        assert not result.passed
        assert result.message == "Stray"

    def test_empty_collection_fails(self, books_collection: Any) -> None:
        assert not run_full_validation(books_collection).all_passed


class TestValidateSeedCommand:
    """Tests for the validate-seed command."""

    @pytest.fixture(autouse=True)
    def quiet_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("src.store.load_dotenv", lambda: False)

    def invoke(self, mongo_client: Any, *args: str) -> Any:
        with (
            patch("scripts.validate_seed.get_mongo_client", return_value=mongo_client),
            patch("scripts.validate_seed.verify_connectivity"),
        ):
            return CliRunner().invoke(main, list(args))

    def test_passes_after_seed(self, mongo_client: Any) -> None:
        mongo_client["shop"]["books"].insert_many([book.to_document() for book in BOOKS])

        result = self.invoke(mongo_client, "--database", "shop")

        assert result.exit_code == 0, result.output
        assert "All validations passed" in result.output
        assert "Connection closed" in result.output

    def test_fails_on_empty_collection(self, mongo_client: Any) -> None:
        result = self.invoke(mongo_client, "--database", "empty")

        assert result.exit_code == 1
        assert "Some validations failed" in result.output
