"""Tests for the query engine."""

from typing import Any

import pytest

from docsearch_index.exceptions import InvalidArgument
from docsearch_index.query import QueryEngine
from docsearch_index.store import IndexStore


def _record(key: str, entry_id: int, *containers: str) -> list[Any]:
    results = [
        [f"{container}::{key}", f"page{entry_id}.html", f"a{entry_id}x{n}", container]
        for n, container in enumerate(containers)
    ]
    return [key, [entry_id, results]]


@pytest.fixture
def engine() -> QueryEngine:
    """Create a QueryEngine instance.

    Returns:
        QueryEngine instance.
    """
    return QueryEngine()


@pytest.fixture
def store() -> IndexStore:
    """Create a store with overlapping identifier names.

    Returns:
        Loaded IndexStore.
    """
    return IndexStore.load(
        [
            _record(
                "evaluatePartialDerivative",
                740,
                "Compadre::DivergenceFreePolynomialBasis",
                "Compadre::ScalarTaylorPolynomialBasis",
            ),
            _record("evaluateConstraints", 739, "Compadre"),
            _record("evaluate", 738, "Compadre::DivergenceFreePolynomialBasis", "Compadre::ScalarTaylorPolynomialBasis"),
            _record("reevaluate", 900, "Compadre"),
            _record("Evaluator", 742, "Compadre"),
            _record("exact", 743, "examples::test_pycompadre"),
        ]
    )


def test_empty_query_returns_nothing(engine: QueryEngine, store: IndexStore) -> None:
    """Test that an empty query is the no-input state, not an error."""
    assert engine.search(store, "") == []
    assert engine.search_entries(store, "") == []


def test_prefix_matches_sorted_by_length(engine: QueryEngine, store: IndexStore) -> None:
    """Test that shorter prefix matches come first."""
    keys = [entry.key for entry in engine.search_entries(store, "evaluate")]

    assert keys[:3] == ["evaluate", "evaluateConstraints", "evaluatePartialDerivative"]


def test_prefix_matches_before_mid_string(engine: QueryEngine, store: IndexStore) -> None:
    """Test that keys matching mid-string follow all prefix matches."""
    keys = [entry.key for entry in engine.search_entries(store, "evaluate")]

    assert keys[-1] == "reevaluate"
    assert len(keys) == 4


def test_substring_match(engine: QueryEngine, store: IndexStore) -> None:
    """Test that fragments inside a key are found."""
    keys = [entry.key for entry in engine.search_entries(store, "partial")]
    assert keys == ["evaluatePartialDerivative"]


def test_case_insensitive(engine: QueryEngine, store: IndexStore) -> None:
    """Test that matching ignores case."""
    assert engine.search(store, "EVALUATOR") == engine.search(store, "evaluator")
    assert len(engine.search(store, "EVALUATOR")) == 1


def test_results_flattened_in_stored_order(engine: QueryEngine, store: IndexStore) -> None:
    """Test that every result of a matching entry is returned in order."""
    results = engine.search(store, "evaluate")

    assert [result.container_label for result in results[:2]] == [
        "Compadre::DivergenceFreePolynomialBasis",
        "Compadre::ScalarTaylorPolynomialBasis",
    ]
    assert len(results) == 6


def test_every_result_contains_query(engine: QueryEngine, store: IndexStore) -> None:
    """Test that matched entries always contain the query."""
    for query in ["e", "val", "XACT", "tor", "zzz"]:
        for entry in engine.search_entries(store, query):
            assert query.lower() in entry.key.lower()


def test_search_is_idempotent(engine: QueryEngine, store: IndexStore) -> None:
    """Test that repeating a query gives identical output."""
    assert engine.search(store, "eval") == engine.search(store, "eval")


def test_tie_break_by_key_then_id(engine: QueryEngine) -> None:
    """Test ordering of equal-length keys."""
    store = IndexStore.load(
        [
            _record("beta", 3, "B"),
            _record("Alfa", 9, "A"),
            _record("alfa", 2, "A"),
        ]
    )

    entries = engine.search_entries(store, "a")

    assert [entry.entry_id for entry in entries] == [2, 9, 3]


def test_no_deduplication(engine: QueryEngine) -> None:
    """Test that entries sharing a key each contribute their results."""
    store = IndexStore.load([_record("exact", 1, "A"), _record("exact", 2, "A")])

    results = engine.search(store, "exact")

    assert [result.anchor for result in results] == ["a1x0", "a2x0"]


def test_exact_scenario(engine: QueryEngine) -> None:
    """Test a single-entry index queried by prefix."""
    store = IndexStore.load(
        [
            [
                "exact",
                [
                    743,
                    [
                        [
                            "exact",
                            "namespaceexamples_1_1test__pycompadre.html",
                            "a7e76af799e3324e7036d3ffcdaaf2668",
                            "examples::test_pycompadre",
                        ]
                    ],
                ],
            ]
        ]
    )

    results = engine.search(store, "exa")

    assert len(results) == 1
    assert results[0].display_label == "exact"
    assert results[0].target_path == "namespaceexamples_1_1test__pycompadre.html"
    assert results[0].anchor == "a7e76af799e3324e7036d3ffcdaaf2668"
    assert results[0].container_label == "examples::test_pycompadre"


def test_search_with_limit(engine: QueryEngine, store: IndexStore) -> None:
    """Test that limit caps the flattened result list."""
    results = engine.search(store, "evaluate", limit=3)

    assert len(results) == 3
    assert results == engine.search(store, "evaluate")[:3]
    assert engine.search(store, "evaluate", limit=0) == []


def test_search_with_container_filter(engine: QueryEngine, store: IndexStore) -> None:
    """Test filtering results by container label."""
    results = engine.search(store, "evaluate", container="Compadre::ScalarTaylorPolynomialBasis")

    assert [result.display_label for result in results] == [
        "Compadre::ScalarTaylorPolynomialBasis::evaluate",
        "Compadre::ScalarTaylorPolynomialBasis::evaluatePartialDerivative",
    ]


def test_negative_limit(engine: QueryEngine, store: IndexStore) -> None:
    """Test that a negative limit is rejected."""
    with pytest.raises(InvalidArgument, match="must not be negative"):
        engine.search(store, "evaluate", limit=-1)


@pytest.mark.parametrize("query", [None, 42, b"exact", ["exact"]])
def test_non_string_query(engine: QueryEngine, store: IndexStore, query: object) -> None:
    """Test that non-string queries raise InvalidArgument."""
    with pytest.raises(InvalidArgument, match="Query must be a string"):
        engine.search(store, query)  # type: ignore[arg-type]


@pytest.mark.parametrize("limit", ["3", 2.5, True])
def test_non_integer_limit(engine: QueryEngine, store: IndexStore, limit: object) -> None:
    """Test that a limit which is not an integer is rejected."""
    with pytest.raises(InvalidArgument, match="Limit must be an integer"):
        engine.search(store, "evaluate", limit=limit)  # type: ignore[arg-type]
