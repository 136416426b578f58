"""
Free US Census geocoder.

Not a category source itself: schools and flood zone need coordinates,
and use this to get them without another paid API.
"""

import logging
from dataclasses import dataclass

from property_command.address import AddressParts
from property_command.sources.base import HttpSource, SourceNoDataError, to_float

logger = logging.getLogger(__name__)

CENSUS_GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/locations/onelineaddress"
CENSUS_BENCHMARK = "Public_AR_Current"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


class GeocodingMixin(HttpSource):
    """Adds Census geocoding to an HttpSource."""

    async def geocode(self, address: AddressParts) -> Coordinates:
        """
        Resolve an address to coordinates.

        Raises:
            SourceNoDataError: the geocoder found no match
            SourceUpstreamError: the geocoder request failed
        """
        data = await self.get_json(
            CENSUS_GEOCODER_URL,
            params={"address": address.raw, "benchmark": CENSUS_BENCHMARK, "format": "json"},
        )
        result = data.get("result") if isinstance(data, dict) else None
        matches = (result or {}).get("addressMatches") or []
        if not matches or not isinstance(matches[0], dict):
            raise SourceNoDataError(self.source_id, "address could not be geocoded")

        coords = matches[0].get("coordinates") or {}
        latitude, longitude = to_float(coords.get("y")), to_float(coords.get("x"))
        if latitude is None or longitude is None:
            raise SourceNoDataError(self.source_id, "geocoder match had no coordinates")

        logger.debug(f"Geocoded {address.raw} -> ({latitude}, {longitude})")
        return Coordinates(latitude=latitude, longitude=longitude)
