"""
Multi-source aggregation of public property data.

AggregationCoordinator fans out one query per category, waits for all of
them to settle and keeps only the categories that succeeded.
"""

from property_command.aggregation.cache import PropertyDataCache
from property_command.aggregation.coordinator import AggregationCoordinator
from property_command.aggregation.factory import build_default_coordinator, make_http_client
from property_command.aggregation.models import (
    AggregatedPropertyData,
    SourceQuery,
    SourceQueryOutcome,
    SourceStatus,
)

__all__ = [
    "AggregatedPropertyData",
    "AggregationCoordinator",
    "PropertyDataCache",
    "SourceQuery",
    "SourceQueryOutcome",
    "SourceStatus",
    "build_default_coordinator",
    "make_http_client",
]
