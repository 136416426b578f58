"""
Data models for multi-source aggregation.

Each category is queried through a SourceQuery (an ordered fallback
chain of fetchers) and settles into exactly one SourceQueryOutcome.
AggregatedPropertyData holds only the categories that were fulfilled.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
from typing import Any

from property_command.constants import MAX_FALLBACK_DEPTH
from property_command.domain.models import Category
from property_command.sources.base import FailureKind, SourceFetcher


class SourceStatus(Enum):
    FULFILLED = "fulfilled"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceQuery:
    """
    One category's fallback chain: a primary fetcher and at most one fallback.

    Attempts run sequentially and stop at the first success.
    """

    category: Category
    attempts: tuple[SourceFetcher, ...]

    def __post_init__(self):
        if not self.attempts:
            raise ValueError(f"SourceQuery for {self.category.value} needs at least one fetcher")
        if len(self.attempts) > 1 + MAX_FALLBACK_DEPTH:
            raise ValueError(
                f"SourceQuery for {self.category.value} has {len(self.attempts)} fetchers; "
                f"at most {MAX_FALLBACK_DEPTH} fallback allowed"
            )
        for fetcher in self.attempts:
            if fetcher.category is not self.category:
                raise ValueError(
                    f"{fetcher!r} serves {fetcher.category.value}, not {self.category.value}"
                )

    @classmethod
    def single(cls, fetcher: SourceFetcher) -> "SourceQuery":
        return cls(category=fetcher.category, attempts=(fetcher,))

    @classmethod
    def with_fallback(cls, primary: SourceFetcher, fallback: SourceFetcher) -> "SourceQuery":
        return cls(category=primary.category, attempts=(primary, fallback))


@dataclass(frozen=True)
class SourceQueryOutcome:
    """
    How one category's query settled.

    Exactly one of value / error is present, matching status. source_id is
    the fetcher that produced the value (or the last one tried on failure).
    """

    category: Category
    source_id: str
    status: SourceStatus
    value: Any = None
    error: str | None = None
    failure_kind: FailureKind | None = None
    attempted: tuple[str, ...] = ()
    from_cache: bool = False

    def __post_init__(self):
        if self.status is SourceStatus.FULFILLED:
            if self.value is None or self.error is not None:
                raise ValueError("fulfilled outcome needs a value and no error")
        elif self.value is not None or not self.error:
            raise ValueError("failed outcome needs an error and no value")

    @property
    def fulfilled(self) -> bool:
        return self.status is SourceStatus.FULFILLED

    @classmethod
    def success(
        cls,
        category: Category,
        source_id: str,
        value: Any,
        attempted: tuple[str, ...] = (),
        from_cache: bool = False,
    ) -> "SourceQueryOutcome":
        return cls(
            category=category,
            source_id=source_id,
            status=SourceStatus.FULFILLED,
            value=value,
            attempted=attempted or (source_id,),
            from_cache=from_cache,
        )

    @classmethod
    def failure(
        cls,
        category: Category,
        source_id: str,
        error: str,
        failure_kind: FailureKind,
        attempted: tuple[str, ...] = (),
    ) -> "SourceQueryOutcome":
        return cls(
            category=category,
            source_id=source_id,
            status=SourceStatus.FAILED,
            error=error,
            failure_kind=failure_kind,
            attempted=attempted or (source_id,),
        )


@dataclass(frozen=True)
class AggregatedPropertyData:
    """
    Merged public data for one address.

    ``records`` only has keys for fulfilled categories; a missing key means
    the category failed or was unconfigured. ``outcomes`` keeps the
    per-category diagnostics.
    """

    address: str
    records: dict[Category, Any] = field(default_factory=dict)
    outcomes: tuple[SourceQueryOutcome, ...] = ()

    def get(self, category: Category, default: Any = None) -> Any:
        return self.records.get(category, default)

    def __contains__(self, category: Category) -> bool:
        return category in self.records

    @property
    def succeeded_categories(self) -> list[Category]:
        return [c for c in Category if c in self.records]

    @property
    def failed_outcomes(self) -> list[SourceQueryOutcome]:
        return [o for o in self.outcomes if not o.fulfilled]

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_dict(self) -> dict:
        """Plain-dict summary: records keyed by category value plus failure reasons."""

        def plain(value):
            if is_dataclass(value):
                return asdict(value)
            if isinstance(value, (list, tuple)):
                return [plain(v) for v in value]
            return value

        return {
            "address": self.address,
            "records": {c.value: plain(v) for c, v in self.records.items()},
            "failures": {o.category.value: o.error for o in self.failed_outcomes},
        }
