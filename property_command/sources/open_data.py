"""
Helpers for city open-data portals (Socrata SODA API).

Chicago, Los Angeles and New York publish permits and violations as
Socrata datasets. Datasets are addressed by portal domain plus dataset
id, and searched with a full-text ``$q`` query on the street address.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from property_command.address import AddressParts
from property_command.sources.base import HttpSource

logger = logging.getLogger(__name__)

DEFAULT_ROW_LIMIT = 50


@dataclass(frozen=True)
class CityDataset:
    """A Socrata dataset for one city, plus how to parse its rows."""

    city_keyword: str  # Lower-case substring matched against the parsed city
    domain: str
    dataset_id: str
    parse_row: Callable[[dict], Any]

    @property
    def url(self) -> str:
        return f"https://{self.domain}/resource/{self.dataset_id}.json"


def find_city_dataset(datasets: tuple[CityDataset, ...], city: str) -> CityDataset | None:
    """Pick the dataset whose city keyword appears in the address's city."""
    lowered = city.lower()
    for dataset in datasets:
        if dataset.city_keyword in lowered:
            return dataset
    return None


class OpenDataSource(HttpSource):
    """HttpSource that can query city Socrata datasets."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        app_token: str | None = None,
    ):
        super().__init__(client, api_key)
        self.app_token = app_token

    async def query_dataset(self, dataset: CityDataset, address: AddressParts) -> list:
        """Full-text search a city dataset for the street address and parse the rows."""
        headers = {"X-App-Token": self.app_token} if self.app_token else None
        rows = await self.get_json(
            dataset.url,
            params={"$q": address.street, "$limit": DEFAULT_ROW_LIMIT},
            headers=headers,
        )
        if not isinstance(rows, list):
            return []
        return [dataset.parse_row(row) for row in rows if isinstance(row, dict)]
