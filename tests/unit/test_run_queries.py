"""Unit tests for the query runner (scripts/run_queries.py).

These tests validate:
1. The query plan holds the sixteen steps in order
2. Steps share collection state (update/delete visible to later steps)
3. The first failure aborts the remaining steps
4. The command releases the connection on every exit path
"""

from __future__ import annotations

import io
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from pymongo.errors import OperationFailure
from rich.console import Console

from scripts.run_queries import (
    QueryStep,
    build_query_plan,
    main,
    render_decades,
    render_records,
    run_query_plan,
)
from src.catalog import BOOKS

EXPLAIN_STATS = {"nReturned": 1, "executionTimeMillis": 0, "totalDocsExamined": 1}


@pytest.fixture
def quiet_console() -> Console:
    """Console writing to a buffer, so tests can inspect output."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def fake_explain() -> Any:
    """The in-memory store has no explain command."""
    with patch("scripts.run_queries.explain_title_lookup", return_value=EXPLAIN_STATS) as mock:
        yield mock


class TestQueryPlan:
    """Tests for build_query_plan()."""

    def test_has_sixteen_steps(self) -> None:
        assert len(build_query_plan()) == 16

    def test_step_order(self) -> None:
        names = [step.name for step in build_query_plan()]
        assert names[0] == 'Books in the "Fiction" genre'
        assert names[3].startswith('Update price for "1984"')
        assert names[4] == 'Delete "Moby Dick"'
        assert names[9] == "Page 1 of books (5 per page)"
        assert names[-1].startswith("Query execution stats")

    def test_steps_are_named(self) -> None:
        assert all(isinstance(step, QueryStep) and step.name for step in build_query_plan())


class TestRunQueryPlan:
    """Tests for run_query_plan()."""

    def test_runs_full_plan(
        self,
        seeded_collection: Any,
        quiet_console: Console,
        fake_explain: Any,
    ) -> None:
        results = dict(run_query_plan(seeded_collection, build_query_plan(), quiet_console))

        assert len(results) == 16
        assert results['Update price for "1984" to 12.99'] == 1
        assert results['Delete "Moby Dick"'] == 1
        assert len(results["Page 1 of books (5 per page)"]) == 5
        assert results["Author with the most books"] == [{"_id": "Fyodor Dostoevsky", "count": 3}]
        fake_explain.assert_called_once_with(seeded_collection, "1984")

    def test_later_steps_see_earlier_writes(
        self,
        seeded_collection: Any,
        quiet_console: Console,
        fake_explain: Any,
    ) -> None:
        results = dict(run_query_plan(seeded_collection, build_query_plan(), quiet_console))

        ascending = results["Books sorted by price (ascending)"]
        assert len(ascending) == len(BOOKS) - 1
        assert "Moby Dick" not in {book["title"] for book in ascending}

        orwell_1984 = next(book for book in ascending if book["title"] == "1984")
        assert orwell_1984["price"] == 12.99

    def test_output_lists_each_step(
        self,
        seeded_collection: Any,
        quiet_console: Console,
        fake_explain: Any,
    ) -> None:
        run_query_plan(seeded_collection, build_query_plan(), quiet_console)
        output = quiet_console.file.getvalue()

        assert "1. Books in the \"Fiction\" genre" in output
        assert "1 document(s) updated" in output
        assert "1 document(s) removed" in output
        assert "1860s" in output
        assert "totalDocsExamined" in output

    def test_failure_aborts_remaining_steps(
        self,
        seeded_collection: Any,
        quiet_console: Console,
    ) -> None:
        after = MagicMock()
        steps = [
            QueryStep("ok", lambda books: books.count_documents({}), str),
            QueryStep("boom", MagicMock(side_effect=OperationFailure("bad filter"))),
            QueryStep("never", after),
        ]

        with pytest.raises(OperationFailure):
            run_query_plan(seeded_collection, steps, quiet_console)

        after.assert_not_called()


class TestRenderers:
    """Tests for the result renderers."""

    def test_render_records_hides_id(self, quiet_console: Console) -> None:
        quiet_console.print(render_records([{"_id": "x1", "title": "Dune", "price": 9.5}]))
        output = quiet_console.file.getvalue()
        assert "Dune" in output
        assert "x1" not in output

    def test_render_records_empty(self, quiet_console: Console) -> None:
        quiet_console.print(render_records([]))
        assert "no matching books" in quiet_console.file.getvalue()

    def test_render_decades(self, quiet_console: Console) -> None:
        quiet_console.print(render_decades([{"_id": 1600, "count": 1}]))
        assert "1600s" in quiet_console.file.getvalue()


class TestRunQueriesCommand:
    """Tests for the run-queries command."""

    @pytest.fixture(autouse=True)
    def quiet_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("src.store.load_dotenv", lambda: False)

    def test_runs_and_closes(self, mongo_client: Any, fake_explain: Any) -> None:
        mongo_client["shop"]["books"].insert_many([book.to_document() for book in BOOKS])

        with (
            patch("scripts.run_queries.get_mongo_client", return_value=mongo_client),
            patch("scripts.run_queries.verify_connectivity"),
            patch("scripts.run_queries.close_client") as close_client,
        ):
            result = CliRunner().invoke(main, ["--database", "shop"])

        assert result.exit_code == 0, result.output
        assert "Connection closed." in result.output
        close_client.assert_called_once_with(mongo_client)
        assert mongo_client["shop"]["books"].count_documents({}) == len(BOOKS) - 1

    def test_failure_closes_and_exits(self, mongo_client: Any) -> None:
        with (
            patch("scripts.run_queries.get_mongo_client", return_value=mongo_client),
            patch("scripts.run_queries.verify_connectivity"),
            patch(
                "scripts.run_queries.find_by_genre",
                side_effect=OperationFailure("unknown operator"),
            ),
            patch("scripts.run_queries.find_published_after") as next_step,
            patch("scripts.run_queries.close_client") as close_client,
        ):
            result = CliRunner().invoke(main, [])

        assert result.exit_code == 1
        assert "unknown operator" in result.output
        assert "Connection closed." in result.output
        next_step.assert_not_called()
        close_client.assert_called_once_with(mongo_client)
