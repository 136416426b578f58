"""
Default wiring of sources into an AggregationCoordinator.

All sources share one httpx.AsyncClient owned by the caller. Credentials
come from Settings; a missing key is passed through as None and the source
fails as unconfigured without touching the network.
"""

import logging

import httpx

from property_command.aggregation.cache import PropertyDataCache
from property_command.aggregation.coordinator import AggregationCoordinator
from property_command.aggregation.models import SourceQuery
from property_command.cache import AppCache
from property_command.config import Settings, get_settings
from property_command.sources import (
    AttomSalesSource,
    AttomTaxSource,
    CensusDemographicsSource,
    FbiCrimeSource,
    FemaFloodZoneSource,
    GreatSchoolsSource,
    MarketDataSource,
    PermitSource,
    RealtyMoleTaxSource,
    ViolationSource,
    WalkScoreSource,
    ZoneomicsSource,
)

logger = logging.getLogger(__name__)


def build_default_queries(client: httpx.AsyncClient, settings: Settings) -> list[SourceQuery]:
    """One query per category, in Category order."""
    return [
        SourceQuery.with_fallback(
            RealtyMoleTaxSource(client, settings.realtymole_api_key),
            AttomTaxSource(client, settings.attom_api_key),
        ),
        SourceQuery.single(
            MarketDataSource(client, settings.rentspree_api_key, settings.realtor_api_key)
        ),
        SourceQuery.single(
            PermitSource(client, settings.building_permits_api_key, settings.socrata_app_token)
        ),
        SourceQuery.single(ViolationSource(client, settings.socrata_app_token)),
        SourceQuery.single(AttomSalesSource(client, settings.attom_api_key)),
        SourceQuery.single(CensusDemographicsSource(client, settings.census_api_key)),
        SourceQuery.single(GreatSchoolsSource(client, settings.greatschools_api_key)),
        SourceQuery.single(FbiCrimeSource(client, settings.fbi_crime_api_key)),
        SourceQuery.single(WalkScoreSource(client, settings.walkscore_api_key)),
        SourceQuery.single(FemaFloodZoneSource(client)),
        SourceQuery.single(ZoneomicsSource(client, settings.zoneomics_api_key)),
    ]


def build_default_cache(settings: Settings) -> PropertyDataCache:
    return PropertyDataCache(AppCache(settings.cache_dir), ttl_hours=settings.cache_ttl_hours)


def build_default_coordinator(
    client: httpx.AsyncClient,
    settings: Settings | None = None,
    cache: PropertyDataCache | None = None,
) -> AggregationCoordinator:
    """
    Build a coordinator over all 11 categories.

    Args:
        client: Shared HTTP client (caller owns its lifecycle)
        settings: Credentials and cache settings (default: get_settings())
        cache: Explicit cache; if None, one is created only when enable_cache is set
    """
    settings = settings or get_settings()
    if cache is None and settings.enable_cache:
        cache = build_default_cache(settings)

    configured = [name for name, present in settings.configured_credentials().items() if present]
    logger.debug(f"Configured credentials: {', '.join(configured) or 'none'}")

    return AggregationCoordinator(build_default_queries(client, settings), cache=cache)


def make_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """AsyncClient with the configured per-request timeout."""
    settings = settings or get_settings()
    return httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)
