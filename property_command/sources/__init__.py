"""
Public property data sources.

One SourceFetcher per external API. Aggregation wires them into per-category
fallback chains (see property_command.aggregation.factory).
"""

from property_command.sources.base import (
    FailureKind,
    HttpSource,
    SourceError,
    SourceFetcher,
    SourceNoDataError,
    SourceUnconfiguredError,
    SourceUpstreamError,
)
from property_command.sources.crime import FbiCrimeSource
from property_command.sources.demographics import CensusDemographicsSource
from property_command.sources.flood import FemaFloodZoneSource
from property_command.sources.market import MarketDataSource
from property_command.sources.permits import PermitSource
from property_command.sources.sales import AttomSalesSource
from property_command.sources.schools import GreatSchoolsSource
from property_command.sources.tax import AttomTaxSource, RealtyMoleTaxSource
from property_command.sources.violations import ViolationSource
from property_command.sources.walkscore import WalkScoreSource
from property_command.sources.zoning import ZoneomicsSource

__all__ = [
    "AttomSalesSource",
    "AttomTaxSource",
    "CensusDemographicsSource",
    "FailureKind",
    "FbiCrimeSource",
    "FemaFloodZoneSource",
    "GreatSchoolsSource",
    "HttpSource",
    "MarketDataSource",
    "PermitSource",
    "RealtyMoleTaxSource",
    "SourceError",
    "SourceFetcher",
    "SourceNoDataError",
    "SourceUnconfiguredError",
    "SourceUpstreamError",
    "ViolationSource",
    "WalkScoreSource",
    "ZoneomicsSource",
]
