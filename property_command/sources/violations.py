"""
Building code violation source (city open-data portals).

Only cities that publish violations as open data are covered; any other
city yields "no data" rather than a guess.
"""

import logging

import httpx

from property_command.address import AddressParts
from property_command.domain.models import Category, Violation
from property_command.sources.base import SourceNoDataError, parse_date, to_float, to_str
from property_command.sources.open_data import CityDataset, OpenDataSource, find_city_dataset

logger = logging.getLogger(__name__)


def parse_chicago_violation(row: dict) -> Violation:
    return Violation(
        violation_id=to_str(row.get("id")),
        violation_type=to_str(row.get("violation_code")),
        description=to_str(row.get("violation_description")),
        issue_date=parse_date(row.get("violation_date")),
        status=to_str(row.get("violation_status")),
    )


def parse_nyc_violation(row: dict) -> Violation:
    return Violation(
        violation_id=to_str(row.get("isn_dob_bis_viol") or row.get("number")),
        violation_type=to_str(row.get("violation_type")),
        description=to_str(row.get("description")),
        issue_date=parse_date(row.get("issue_date")),
        status=to_str(row.get("violation_category")),
        fine=to_float(row.get("penalty_imposed")),
    )


VIOLATION_DATASETS = (
    CityDataset("chicago", "data.cityofchicago.org", "22u3-xenr", parse_chicago_violation),
    CityDataset("new york", "data.cityofnewyork.us", "3h2n-5cm9", parse_nyc_violation),
)


class ViolationSource(OpenDataSource):
    """Open building code violations for an address."""

    source_id = "violations"
    category = Category.VIOLATIONS

    def __init__(
        self,
        client: httpx.AsyncClient,
        app_token: str | None = None,
        datasets: tuple[CityDataset, ...] = VIOLATION_DATASETS,
    ):
        super().__init__(client, app_token=app_token)
        self.datasets = datasets

    async def fetch(self, address: AddressParts) -> list[Violation]:
        dataset = find_city_dataset(self.datasets, address.city)
        if dataset is None:
            raise SourceNoDataError(
                self.source_id, f"no violations dataset for city {address.city or '(unknown)'}"
            )

        violations = await self.query_dataset(dataset, address)
        if not violations:
            raise SourceNoDataError(self.source_id, "no violations found for address")
        return violations
