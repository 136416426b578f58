"""
Unit tests for settle-all aggregation.

Sources are FakeFetchers (see conftest), so no network is involved.
"""

import asyncio
import logging
import time

import pytest

from property_command.aggregation import AggregationCoordinator, SourceQuery
from property_command.aggregation.models import SourceQueryOutcome, SourceStatus
from property_command.domain.models import Category, WalkScore
from property_command.sources.base import (
    FailureKind,
    SourceNoDataError,
    SourceUnconfiguredError,
    SourceUpstreamError,
)

ADDRESS = "123 Main St, Boston, MA 02101"


def aggregate(coordinator, address=ADDRESS):
    return asyncio.run(coordinator.aggregate(address))


class TestSettleAll:
    def test_delayed_source_survives_immediate_failure(self, fake_fetcher):
        """One source rejects at once, another resolves later; the later value still lands."""
        failing = fake_fetcher(Category.TAX, error=SourceUpstreamError("tax", "HTTP 500"))
        slow = fake_fetcher(Category.WALKSCORE, value=WalkScore(score=88), delay=0.05)
        queries = [SourceQuery.single(failing), SourceQuery.single(slow)]
        coordinator = AggregationCoordinator(queries)

        data = aggregate(coordinator)

        assert data.get(Category.WALKSCORE) == WalkScore(score=88)
        assert Category.TAX not in data
        assert slow.calls == 1

    def test_sources_run_concurrently(self, fake_fetcher):
        """Eleven 50 ms sources finish in roughly one delay, not eleven."""
        queries = [
            SourceQuery.single(fake_fetcher(category, value=category.value, delay=0.05))
            for category in Category
        ]
        coordinator = AggregationCoordinator(queries)

        start = time.perf_counter()
        data = aggregate(coordinator)
        elapsed = time.perf_counter() - start

        assert len(data.records) == 11
        assert elapsed < 0.4

    def test_five_fail_six_succeed(self, fake_fetcher):
        categories = list(Category)
        failing, succeeding = categories[:5], categories[5:]
        errors = [
            SourceUnconfiguredError("x", "KEY not configured"),
            SourceUpstreamError("x", "HTTP 503"),
            SourceNoDataError("x", "nothing"),
            RuntimeError("boom"),
            asyncio.TimeoutError(),
        ]
        queries = [
            SourceQuery.single(fake_fetcher(category, error=error))
            for category, error in zip(failing, errors)
        ] + [SourceQuery.single(fake_fetcher(c, value={"category": c.value})) for c in succeeding]

        data = aggregate(AggregationCoordinator(queries))

        assert set(data.records) == set(succeeding)
        for category in succeeding:
            assert data.get(category) == {"category": category.value}
        assert {o.category for o in data.failed_outcomes} == set(failing)
        assert len(data.outcomes) == 11

    def test_results_map_to_category_regardless_of_completion_order(self, fake_fetcher):
        queries = [
            SourceQuery.single(fake_fetcher(category, value=category.value, delay=0.01 * (11 - i)))
            for i, category in enumerate(Category)
        ]

        data = aggregate(AggregationCoordinator(queries))

        assert all(data.get(category) == category.value for category in Category)

    def test_all_failing_returns_empty_result(self, fake_fetcher, caplog):
        queries = [
            SourceQuery.single(fake_fetcher(c, error=SourceUnconfiguredError("x", "missing key")))
            for c in Category
        ]

        with caplog.at_level(logging.INFO, logger="property_command"):
            data = aggregate(AggregationCoordinator(queries))

        assert data.is_empty
        assert data.records == {}
        assert "0/11 categories" in caplog.text
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_summary_logged_at_info(self, fake_fetcher, caplog):
        queries = [SourceQuery.single(fake_fetcher(Category.ZONING, value="R-1"))]

        with caplog.at_level(logging.INFO, logger="property_command"):
            aggregate(AggregationCoordinator(queries))

        assert "1/1 categories" in caplog.text


class TestFailureClassification:
    @pytest.mark.parametrize(
        "error,kind",
        [
            (SourceUnconfiguredError("s", "KEY not configured"), FailureKind.UNCONFIGURED),
            (SourceUpstreamError("s", "HTTP 500"), FailureKind.UPSTREAM),
            (SourceNoDataError("s", "empty"), FailureKind.NO_DATA),
            (ValueError("unexpected"), FailureKind.UPSTREAM),
        ],
    )
    def test_failure_kind_recorded(self, fake_fetcher, error, kind):
        fetcher = fake_fetcher(Category.CRIME, error=error)

        data = aggregate(AggregationCoordinator([SourceQuery.single(fetcher)]))

        (outcome,) = data.outcomes
        assert outcome.status is SourceStatus.FAILED
        assert outcome.failure_kind is kind
        assert outcome.value is None
        assert outcome.error

    def test_none_value_is_no_data(self, fake_fetcher):
        fetcher = fake_fetcher(Category.SCHOOLS, value=None)

        data = aggregate(AggregationCoordinator([SourceQuery.single(fetcher)]))

        assert Category.SCHOOLS not in data
        assert data.outcomes[0].failure_kind is FailureKind.NO_DATA

    @pytest.mark.parametrize("empty", [[], {}, ()])
    def test_empty_collection_is_no_data(self, fake_fetcher, empty):
        fetcher = fake_fetcher(Category.PERMITS, value=empty)

        data = aggregate(AggregationCoordinator([SourceQuery.single(fetcher)]))

        assert Category.PERMITS not in data
        assert data.is_empty
        assert data.outcomes[0].failure_kind is FailureKind.NO_DATA

    def test_empty_primary_falls_back(self, fake_fetcher):
        primary = fake_fetcher(Category.TAX, value={}, source_id="realtymole")
        fallback = fake_fetcher(Category.TAX, value={"assessed_value": 1}, source_id="attom")

        data = aggregate(AggregationCoordinator([SourceQuery.with_fallback(primary, fallback)]))

        assert data.get(Category.TAX) == {"assessed_value": 1}
        assert data.outcomes[0].source_id == "attom"


class TestFallback:
    def test_fallback_used_when_primary_fails(self, fake_fetcher):
        primary = fake_fetcher(
            Category.TAX,
            error=SourceUpstreamError("realtymole", "HTTP 500"),
            source_id="realtymole",
        )
        fallback = fake_fetcher(Category.TAX, value={"assessed_value": 1}, source_id="attom")

        data = aggregate(AggregationCoordinator([SourceQuery.with_fallback(primary, fallback)]))

        (outcome,) = data.outcomes
        assert data.get(Category.TAX) == {"assessed_value": 1}
        assert outcome.source_id == "attom"
        assert outcome.attempted == ("realtymole", "attom")

    def test_fallback_skipped_when_primary_succeeds(self, fake_fetcher):
        primary = fake_fetcher(Category.TAX, value="primary", source_id="realtymole")
        fallback = fake_fetcher(Category.TAX, value="fallback", source_id="attom")

        data = aggregate(AggregationCoordinator([SourceQuery.with_fallback(primary, fallback)]))

        assert data.get(Category.TAX) == "primary"
        assert fallback.calls == 0

    def test_both_failing_reports_both_reasons(self, fake_fetcher):
        primary = fake_fetcher(
            Category.TAX,
            error=SourceUnconfiguredError("realtymole", "REALTYMOLE_API_KEY not configured"),
            source_id="realtymole",
        )
        fallback = fake_fetcher(
            Category.TAX, error=SourceNoDataError("attom", "no property record"), source_id="attom"
        )

        data = aggregate(AggregationCoordinator([SourceQuery.with_fallback(primary, fallback)]))

        (outcome,) = data.outcomes
        assert "REALTYMOLE_API_KEY" in outcome.error
        assert "no property record" in outcome.error
        assert outcome.failure_kind is FailureKind.NO_DATA
        assert outcome.source_id == "attom"

    def test_chain_longer_than_one_fallback_rejected(self, fake_fetcher):
        fetchers = tuple(fake_fetcher(Category.TAX, value=i) for i in range(3))

        with pytest.raises(ValueError):
            SourceQuery(category=Category.TAX, attempts=fetchers)

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            SourceQuery(category=Category.TAX, attempts=())

    def test_chain_category_must_match(self, fake_fetcher):
        with pytest.raises(ValueError):
            SourceQuery(category=Category.TAX, attempts=(fake_fetcher(Category.SALES, value=1),))


class TestCoordinatorConstruction:
    def test_duplicate_category_rejected(self, fake_fetcher):
        queries = [
            SourceQuery.single(fake_fetcher(Category.ZONING, value=1)),
            SourceQuery.single(fake_fetcher(Category.ZONING, value=2)),
        ]

        with pytest.raises(ValueError):
            AggregationCoordinator(queries)

    def test_calls_are_independent(self, fake_fetcher):
        """No state carries over between aggregate() calls."""
        fetcher = fake_fetcher(Category.WALKSCORE, value=WalkScore(score=50))
        coordinator = AggregationCoordinator([SourceQuery.single(fetcher)])

        first = aggregate(coordinator)
        second = aggregate(coordinator, "9 Elm St, Chicago, IL")

        assert fetcher.calls == 2
        assert first.address == ADDRESS
        assert second.address == "9 Elm St, Chicago, IL"


class TestOutcomeInvariants:
    def test_fulfilled_needs_value(self):
        with pytest.raises(ValueError):
            SourceQueryOutcome(category=Category.TAX, source_id="s", status=SourceStatus.FULFILLED)

    def test_failed_needs_error(self):
        with pytest.raises(ValueError):
            SourceQueryOutcome(category=Category.TAX, source_id="s", status=SourceStatus.FAILED)

    def test_failed_cannot_carry_value(self):
        with pytest.raises(ValueError):
            SourceQueryOutcome(
                category=Category.TAX,
                source_id="s",
                status=SourceStatus.FAILED,
                value=1,
                error="boom",
            )

    def test_to_dict_uses_category_values(self, fake_fetcher):
        queries = [
            SourceQuery.single(fake_fetcher(Category.WALKSCORE, value=WalkScore(score=70))),
            SourceQuery.single(fake_fetcher(Category.ZONING, error=SourceNoDataError("z", "none"))),
        ]

        summary = aggregate(AggregationCoordinator(queries)).to_dict()

        assert summary["records"] == {"walkscore": {"score": 70, "description": None}}
        assert summary["failures"] == {"zoning": "z: none"}
