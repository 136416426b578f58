"""Walk Score source."""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, WalkScore
from property_command.sources.base import HttpSource, SourceNoDataError, to_int, to_str

logger = logging.getLogger(__name__)

WALKSCORE_URL = "https://api.walkscore.com/score"
WALKSCORE_STATUS_OK = 1


class WalkScoreSource(HttpSource):
    source_id = "walkscore"
    category = Category.WALKSCORE

    async def fetch(self, address: AddressParts) -> WalkScore:
        api_key = self.require_api_key("WALKSCORE_API_KEY")
        data = await self.get_json(
            WALKSCORE_URL,
            params={"format": "json", "address": address.raw, "wsapikey": api_key},
        )
        if not isinstance(data, dict):
            raise SourceNoDataError(self.source_id, "unexpected response shape")

        # Walk Score reports API-level failures in the body with HTTP 200
        status = data.get("status")
        if status != WALKSCORE_STATUS_OK:
            raise SourceNoDataError(self.source_id, f"walk score status {status}")

        score = to_int(data.get("walkscore"))
        if score is None:
            raise SourceNoDataError(self.source_id, "response had no walk score")
        return WalkScore(score=score, description=to_str(data.get("description")))
