"""
Market value and rent estimate source.

Combines two APIs queried concurrently: Rentspree for the rent estimate
and Realtor for value, trends and comparables. The category succeeds if
either half succeeds.
"""

import asyncio
import logging
from typing import Any

import httpx

from property_command.address import AddressParts
from property_command.domain.models import Category, Comparable, MarketData, PricePoint
from property_command.sources.base import (
    HttpSource,
    SourceError,
    SourceNoDataError,
    SourceUnconfiguredError,
    SourceUpstreamError,
    parse_date,
    to_float,
    to_int,
    to_str,
)

logger = logging.getLogger(__name__)

RENTSPREE_URL = "https://api.rentspree.com/v1/properties/estimate"
REALTOR_URL = "https://api.realtor.com/v2/properties"
REALTOR_HOST = "realtor.com"


def parse_price_history(history: list) -> tuple[PricePoint, ...]:
    return tuple(
        PricePoint(
            date=parse_date(point.get("date")),
            price=to_float(point.get("price")),
            event=to_str(point.get("event")),
        )
        for point in history
        if isinstance(point, dict)
    )


def parse_comparables(comps: list) -> tuple[Comparable, ...]:
    return tuple(
        Comparable(
            address=str(comp.get("address") or ""),
            price=to_float(comp.get("price")),
            price_per_sqft=to_float(comp.get("pricePerSqft")),
            square_footage=to_int(comp.get("squareFootage")),
            bedrooms=to_int(comp.get("bedrooms")),
            bathrooms=to_float(comp.get("bathrooms")),
            year_built=to_int(comp.get("yearBuilt")),
            distance=to_float(comp.get("distance")),
            sale_date=parse_date(comp.get("saleDate")),
        )
        for comp in comps
        if isinstance(comp, dict)
    )


def parse_market_data(rent_data: dict | None, value_data: dict | None) -> MarketData:
    """Merge a Rentspree estimate and a Realtor property record."""
    rent = (rent_data.get("estimate") if isinstance(rent_data, dict) else None) or {}
    properties = (value_data.get("properties") if isinstance(value_data, dict) else None) or []
    value = properties[0] if properties and isinstance(properties[0], dict) else {}

    return MarketData(
        estimated_value=to_float(value.get("price")),
        price_per_sqft=to_float(value.get("pricePerSqft")),
        rent_estimate=to_float(rent.get("monthlyRent")),
        rent_per_sqft=to_float(rent.get("rentPerSqft")),
        appreciation_1_year=to_float(value.get("appreciation1Year")),
        appreciation_5_year=to_float(value.get("appreciation5Year")),
        days_on_market=to_int(value.get("daysOnMarket")),
        inventory=to_int(value.get("inventory")),
        price_history=parse_price_history(value.get("priceHistory") or []),
        comparables=parse_comparables(value.get("comparables") or []),
    )


class MarketDataSource(HttpSource):
    """Market value plus rent estimate from Rentspree and Realtor."""

    source_id = "market"
    category = Category.MARKET

    def __init__(
        self,
        client: httpx.AsyncClient,
        rentspree_api_key: str | None = None,
        realtor_api_key: str | None = None,
    ):
        super().__init__(client)
        self.rentspree_api_key = rentspree_api_key
        self.realtor_api_key = realtor_api_key

    async def fetch(self, address: AddressParts) -> MarketData:
        if not self.rentspree_api_key and not self.realtor_api_key:
            raise SourceUnconfiguredError(
                self.source_id, "neither RENTSPREE_API_KEY nor REALTOR_API_KEY configured"
            )

        rent_data, value_data = await asyncio.gather(
            self._fetch_rent(address),
            self._fetch_value(address),
            return_exceptions=True,
        )

        failures = [r for r in (rent_data, value_data) if isinstance(r, BaseException)]
        if len(failures) == 2:
            reasons = "; ".join(str(f) for f in failures)
            raise SourceUpstreamError(self.source_id, f"all market data APIs failed ({reasons})")
        for failure in failures:
            logger.debug(f"Partial market data for {address.raw}: {failure}")

        market = parse_market_data(
            None if isinstance(rent_data, BaseException) else rent_data,
            None if isinstance(value_data, BaseException) else value_data,
        )
        if market.estimated_value is None and market.rent_estimate is None:
            raise SourceNoDataError(self.source_id, "no value or rent estimate for address")
        return market

    async def _fetch_rent(self, address: AddressParts) -> Any:
        if not self.rentspree_api_key:
            raise SourceUnconfiguredError("rentspree", "RENTSPREE_API_KEY not configured")
        try:
            return await self.get_json(
                RENTSPREE_URL,
                params={"address": address.raw},
                headers={"Authorization": f"Bearer {self.rentspree_api_key}"},
            )
        except SourceError as e:
            raise SourceUpstreamError("rentspree", e.reason) from e

    async def _fetch_value(self, address: AddressParts) -> Any:
        if not self.realtor_api_key:
            raise SourceUnconfiguredError("realtor", "REALTOR_API_KEY not configured")
        try:
            return await self.get_json(
                REALTOR_URL,
                params={"address": address.raw},
                headers={"X-RapidAPI-Key": self.realtor_api_key, "X-RapidAPI-Host": REALTOR_HOST},
            )
        except SourceError as e:
            raise SourceUpstreamError("realtor", e.reason) from e
