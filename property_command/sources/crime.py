"""
Crime statistics source (FBI Crime Data API, state estimates).

Rates are per 100,000 residents. The trend compares the latest year's
total rate with the year before it.
"""

import logging
from datetime import date

import httpx

from property_command.address import AddressParts
from property_command.domain.models import Category, CrimeStats
from property_command.sources.base import HttpSource, SourceNoDataError, to_float, to_int

logger = logging.getLogger(__name__)

FBI_ESTIMATES_URL = "https://api.usa.gov/crime/fbi/sapi/api/estimates/states"
PER_CAPITA_BASE = 100_000
TREND_TOLERANCE = 0.05  # Relative change below 5% counts as stable
YEARS_REQUESTED = 5


def rates_for_year(record: dict) -> tuple[int, float, float] | None:
    """(year, violent rate, property rate) for one estimates record, or None."""
    year = to_int(record.get("year"))
    population = to_float(record.get("population"))
    violent = to_float(record.get("violent_crime"))
    prop = to_float(record.get("property_crime"))
    if year is None or not population or violent is None or prop is None:
        return None
    return (
        year,
        violent / population * PER_CAPITA_BASE,
        prop / population * PER_CAPITA_BASE,
    )


def compute_trend(previous_rate: float | None, latest_rate: float) -> str:
    if not previous_rate:
        return "stable"
    change = (latest_rate - previous_rate) / previous_rate
    if change > TREND_TOLERANCE:
        return "increasing"
    if change < -TREND_TOLERANCE:
        return "decreasing"
    return "stable"


def parse_crime_estimates(records: list) -> CrimeStats | None:
    yearly = sorted(
        (r for r in (rates_for_year(rec) for rec in records if isinstance(rec, dict)) if r),
        key=lambda r: r[0],
    )
    if not yearly:
        return None

    year, violent, prop = yearly[-1]
    previous_total = yearly[-2][1] + yearly[-2][2] if len(yearly) > 1 else None
    total = violent + prop
    return CrimeStats(
        year=year,
        crime_rate=round(total, 1),
        violent_crime_rate=round(violent, 1),
        property_crime_rate=round(prop, 1),
        trend=compute_trend(previous_total, total),
    )


class FbiCrimeSource(HttpSource):
    """State crime rates for the address's state."""

    source_id = "fbi_crime"
    category = Category.CRIME

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        today: date | None = None,
    ):
        super().__init__(client, api_key)
        self.today = today

    async def fetch(self, address: AddressParts) -> CrimeStats:
        api_key = self.require_api_key("FBI_CRIME_API_KEY")
        state = address.state.upper()
        if len(state) != 2:
            raise SourceNoDataError(self.source_id, f"unknown state {address.state or '(missing)'}")

        # Estimates lag about two years behind the calendar
        last_year = (self.today or date.today()).year - 2
        first_year = last_year - YEARS_REQUESTED + 1
        data = await self.get_json(
            f"{FBI_ESTIMATES_URL}/{state}/{first_year}/{last_year}",
            params={"API_KEY": api_key},
        )

        records = data.get("results") if isinstance(data, dict) else data
        stats = parse_crime_estimates(records if isinstance(records, list) else [])
        if stats is None:
            raise SourceNoDataError(self.source_id, f"no crime estimates for {state}")
        return stats
