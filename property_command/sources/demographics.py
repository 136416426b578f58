"""
Demographics source (US Census ACS 5-year estimates).

Fetches every place in the address's state and picks the one whose name
starts with the address's city. An unknown state or an unmatched city
is "no data"; there is no default state and no first-row fallback.
"""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, Demographics
from property_command.sources.base import HttpSource, SourceNoDataError, to_float, to_int

logger = logging.getLogger(__name__)

CENSUS_ACS_URL = "https://api.census.gov/data/2021/acs/acs5"

# NAME first, then the estimates in Demographics field order
ACS_VARIABLES = ("NAME", "B19013_001E", "B25077_001E", "B01002_001E", "B01003_001E")

# Census suppresses unavailable estimates with large negative sentinels
CENSUS_MISSING_SENTINEL = -666666666

STATE_FIPS = {
    "AL": "01", "AK": "02", "AZ": "04", "AR": "05", "CA": "06",
    "CO": "08", "CT": "09", "DE": "10", "DC": "11", "FL": "12",
    "GA": "13", "HI": "15", "ID": "16", "IL": "17", "IN": "18",
    "IA": "19", "KS": "20", "KY": "21", "LA": "22", "ME": "23",
    "MD": "24", "MA": "25", "MI": "26", "MN": "27", "MS": "28",
    "MO": "29", "MT": "30", "NE": "31", "NV": "32", "NH": "33",
    "NJ": "34", "NM": "35", "NY": "36", "NC": "37", "ND": "38",
    "OH": "39", "OK": "40", "OR": "41", "PA": "42", "RI": "44",
    "SC": "45", "SD": "46", "TN": "47", "TX": "48", "UT": "49",
    "VT": "50", "VA": "51", "WA": "53", "WV": "54", "WI": "55",
    "WY": "56",
}  # fmt: skip


def _estimate(value) -> float | None:
    number = to_float(value)
    if number is None or number <= CENSUS_MISSING_SENTINEL:
        return None
    return number


def find_place_row(rows: list, city: str) -> list | None:
    """Find the ACS row for a city; the header row is skipped."""
    wanted = city.strip().lower()
    if not wanted:
        return None
    for row in rows[1:]:
        if isinstance(row, list) and row and str(row[0]).lower().startswith(wanted):
            return row
    return None


def parse_census_row(row: list) -> Demographics:
    income, home_value, age, population = (_estimate(v) for v in row[1:5])
    return Demographics(
        place_name=str(row[0]),
        median_household_income=to_int(income),
        median_home_value=to_int(home_value),
        median_age=age,
        population=to_int(population),
    )


class CensusDemographicsSource(HttpSource):
    """Place-level demographics; works without a key (the key only lifts rate limits)."""

    source_id = "census"
    category = Category.DEMOGRAPHICS

    async def fetch(self, address: AddressParts) -> Demographics:
        state_fips = STATE_FIPS.get(address.state.upper())
        if state_fips is None:
            raise SourceNoDataError(self.source_id, f"unknown state {address.state or '(missing)'}")
        if not address.city:
            raise SourceNoDataError(self.source_id, "address has no city")

        params = {"get": ",".join(ACS_VARIABLES), "for": "place:*", "in": f"state:{state_fips}"}
        if self.api_key:
            params["key"] = self.api_key
        rows = await self.get_json(CENSUS_ACS_URL, params=params)

        if not isinstance(rows, list) or len(rows) < 2:
            raise SourceNoDataError(self.source_id, "census returned no places")

        row = find_place_row(rows, address.city)
        if row is None or len(row) < len(ACS_VARIABLES):
            raise SourceNoDataError(self.source_id, f"no census place matching {address.city}")
        return parse_census_row(row)
