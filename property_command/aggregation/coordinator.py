"""
Settle-all aggregation of public property data.

Every category query runs as its own task and all of them are awaited to
completion; a failing category never cancels or delays the others. Each
task catches its own exceptions and settles into a SourceQueryOutcome,
so aggregate() itself never raises.
"""

import asyncio
import logging
from collections.abc import Iterable

from property_command.address import AddressParts, parse_address
from property_command.aggregation.cache import PropertyDataCache
from property_command.aggregation.models import (
    AggregatedPropertyData,
    SourceQuery,
    SourceQueryOutcome,
)
from property_command.sources.base import FailureKind, SourceError

logger = logging.getLogger(__name__)


def _is_empty(value) -> bool:
    """A successful call that found nothing: None or an empty collection."""
    return value is None or (isinstance(value, (list, tuple, dict)) and not value)


class AggregationCoordinator:
    """
    Query all configured categories concurrently and merge what succeeds.

    Args:
        queries: One SourceQuery per category (duplicates rejected)
        cache: Optional cache of fulfilled categories
    """

    def __init__(self, queries: Iterable[SourceQuery], cache: PropertyDataCache | None = None):
        self.queries = tuple(queries)
        self.cache = cache

        seen = set()
        for query in self.queries:
            if query.category in seen:
                raise ValueError(f"Duplicate query for category {query.category.value}")
            seen.add(query.category)

    @property
    def categories(self) -> list:
        return [query.category for query in self.queries]

    async def aggregate(self, address: str) -> AggregatedPropertyData:
        """
        Look up every category for an address.

        Returns:
            AggregatedPropertyData with only the fulfilled categories present.
            An all-empty result is still a normal return value.
        """
        parts = parse_address(address)
        outcomes = await asyncio.gather(*(self._settle(query, parts) for query in self.queries))

        records = {}
        for outcome in outcomes:
            if outcome.fulfilled:
                records[outcome.category] = outcome.value
            else:
                logger.debug(
                    f"Omitting {outcome.category.value} for {parts.raw} "
                    f"({outcome.failure_kind.value}): {outcome.error}"
                )

        logger.info(f"Aggregated {len(records)}/{len(self.queries)} categories for {parts.raw}")
        if self.queries and not records:
            logger.warning(f"No public data found for {parts.raw}")

        return AggregatedPropertyData(address=parts.raw, records=records, outcomes=tuple(outcomes))

    async def _settle(self, query: SourceQuery, address: AddressParts) -> SourceQueryOutcome:
        """Run one category's fallback chain; never raises."""
        cached = self._cache_get(query, address)
        if cached is not None:
            return cached

        attempted: list[str] = []
        errors: list[str] = []
        failure_kind = FailureKind.UPSTREAM

        for fetcher in query.attempts:
            attempted.append(fetcher.source_id)
            try:
                value = await fetcher.fetch(address)
            except SourceError as e:
                failure_kind = e.kind
                errors.append(str(e))
            except Exception as e:
                failure_kind = FailureKind.UPSTREAM
                errors.append(f"{fetcher.source_id}: {type(e).__name__}: {e}")
            else:
                if _is_empty(value):
                    failure_kind = FailureKind.NO_DATA
                    errors.append(f"{fetcher.source_id}: returned no data")
                    continue
                self._cache_set(query, address, fetcher.source_id, value)
                return SourceQueryOutcome.success(
                    query.category, fetcher.source_id, value, attempted=tuple(attempted)
                )

            if len(attempted) < len(query.attempts):
                logger.debug(f"{query.category.value}: {errors[-1]}; trying fallback")

        return SourceQueryOutcome.failure(
            query.category,
            attempted[-1],
            "; ".join(errors),
            failure_kind,
            attempted=tuple(attempted),
        )

    def _cache_get(self, query: SourceQuery, address: AddressParts) -> SourceQueryOutcome | None:
        if self.cache is None:
            return None
        try:
            # Blocking diskcache call on the event loop; the store is local SQLite
            entry = self.cache.get(address, query.category)
        except Exception as e:
            logger.debug(f"Cache read failed for {query.category.value}: {e}")
            return None
        if entry is None:
            return None

        source_id, value = entry
        logger.debug(f"Cache hit for {address.raw} {query.category.value}")
        return SourceQueryOutcome.success(query.category, source_id, value, from_cache=True)

    def _cache_set(self, query: SourceQuery, address: AddressParts, source_id: str, value) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(address, query.category, source_id, value)
        except Exception as e:
            logger.debug(f"Cache write failed for {query.category.value}: {e}")
