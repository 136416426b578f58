"""Nearby schools source (GreatSchools, located via the Census geocoder)."""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, School
from property_command.sources.base import SourceNoDataError, to_float, to_int, to_str
from property_command.sources.geocoding import GeocodingMixin

logger = logging.getLogger(__name__)

GREATSCHOOLS_URL = "https://gs-api.greatschools.org/nearby-schools"
SCHOOL_SEARCH_RADIUS_MILES = 5
MAX_SCHOOLS = 10


def parse_school(record: dict) -> School | None:
    name = to_str(record.get("name"))
    if name is None:
        return None
    return School(
        name=name,
        level=to_str(record.get("level")),
        rating=to_int(record.get("rating")),
        distance=to_float(record.get("distance")),
        enrollment=to_int(record.get("enrollment")),
    )


class GreatSchoolsSource(GeocodingMixin):
    """Schools within a few miles of the address, nearest first."""

    source_id = "greatschools"
    category = Category.SCHOOLS

    async def fetch(self, address: AddressParts) -> list[School]:
        api_key = self.require_api_key("GREATSCHOOLS_API_KEY")
        coords = await self.geocode(address)

        data = await self.get_json(
            GREATSCHOOLS_URL,
            params={
                "lat": coords.latitude,
                "lon": coords.longitude,
                "distance": SCHOOL_SEARCH_RADIUS_MILES,
                "limit": MAX_SCHOOLS,
            },
            headers={"x-api-key": api_key},
        )
        records = data.get("schools") if isinstance(data, dict) else data
        if not isinstance(records, list):
            records = []

        schools = [s for s in (parse_school(r) for r in records if isinstance(r, dict)) if s]
        if not schools:
            raise SourceNoDataError(self.source_id, "no schools near address")

        schools.sort(key=lambda s: s.distance if s.distance is not None else float("inf"))
        return schools
