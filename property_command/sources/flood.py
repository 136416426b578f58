"""
Flood zone source (FEMA National Flood Hazard Layer).

Queries the NFHL flood hazard zones layer at the address's point.
Addresses outside any mapped zone are "no data".
"""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, FloodZone
from property_command.sources.base import SourceNoDataError, to_str
from property_command.sources.geocoding import GeocodingMixin

logger = logging.getLogger(__name__)

FEMA_NFHL_URL = "https://hazards.fema.gov/arcgis/rest/services/public/NFHL/MapServer/28/query"


class FemaFloodZoneSource(GeocodingMixin):
    source_id = "fema_nfhl"
    category = Category.FLOODZONE

    async def fetch(self, address: AddressParts) -> FloodZone:
        coords = await self.geocode(address)
        data = await self.get_json(
            FEMA_NFHL_URL,
            params={
                "geometry": f"{coords.longitude},{coords.latitude}",
                "geometryType": "esriGeometryPoint",
                "inSR": "4326",
                "spatialRel": "esriSpatialRelIntersects",
                "outFields": "FLD_ZONE,ZONE_SUBTY",
                "returnGeometry": "false",
                "f": "json",
            },
        )

        features = data.get("features") if isinstance(data, dict) else None
        if not features or not isinstance(features[0], dict):
            raise SourceNoDataError(self.source_id, "no flood hazard zone at address")

        attributes = features[0].get("attributes") or {}
        zone = to_str(attributes.get("FLD_ZONE"))
        if zone is None:
            raise SourceNoDataError(self.source_id, "flood hazard feature had no zone")
        return FloodZone(zone=zone, subtype=to_str(attributes.get("ZONE_SUBTY")))
