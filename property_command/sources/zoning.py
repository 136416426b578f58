"""Zoning source (Zoneomics zone detail API)."""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, Zoning
from property_command.sources.base import HttpSource, SourceNoDataError, to_str

logger = logging.getLogger(__name__)

ZONEOMICS_URL = "https://api.zoneomics.com/v2/zoneDetail"

# Zone detail keys promoted into Zoning.extra when present
ZONING_EXTRA_KEYS = ("zone_type", "zone_sub_type", "link", "city_name")


def parse_zone_detail(data: dict) -> Zoning | None:
    detail = data.get("data") if isinstance(data.get("data"), dict) else data
    zone = detail.get("zone_details") if isinstance(detail.get("zone_details"), dict) else detail

    code = to_str(zone.get("zone_code"))
    if code is None:
        return None
    extra = {key: zone[key] for key in ZONING_EXTRA_KEYS if zone.get(key) not in (None, "")}
    return Zoning(code=code, description=to_str(zone.get("zone_name")), extra=extra)


class ZoneomicsSource(HttpSource):
    source_id = "zoneomics"
    category = Category.ZONING

    async def fetch(self, address: AddressParts) -> Zoning:
        api_key = self.require_api_key("ZONEOMICS_API_KEY")
        data = await self.get_json(
            ZONEOMICS_URL,
            params={"api_key": api_key, "address": address.raw},
        )
        zoning = parse_zone_detail(data) if isinstance(data, dict) else None
        if zoning is None:
            raise SourceNoDataError(self.source_id, "no zoning designation for address")
        return zoning
