"""
Building permit source.

Cities with open-data portals (Chicago, Los Angeles, New York) are
queried directly and need no key. Everywhere else falls back to a
generic permit API that requires BUILDING_PERMITS_API_KEY.
"""

import logging

import httpx

from property_command.address import AddressParts
from property_command.domain.models import Category, Permit
from property_command.sources.base import SourceNoDataError, parse_date, to_float, to_str
from property_command.sources.open_data import CityDataset, OpenDataSource, find_city_dataset

logger = logging.getLogger(__name__)

GENERIC_PERMITS_URL = "https://api.buildingpermits.com/v1/permits"


def parse_chicago_permit(row: dict) -> Permit:
    return Permit(
        permit_number=to_str(row.get("permit_") or row.get("id")),
        permit_type=to_str(row.get("permit_type")),
        description=to_str(row.get("work_description")),
        value=to_float(row.get("estimated_cost") or row.get("reported_cost")),
        issue_date=parse_date(row.get("issue_date")),
        status=to_str(row.get("permit_status") or row.get("status")),
        contractor=to_str(row.get("contact_1_name") or row.get("contractor_name")),
    )


def parse_la_permit(row: dict) -> Permit:
    return Permit(
        permit_number=to_str(row.get("permit_nbr")),
        permit_type=to_str(row.get("permit_type")),
        description=to_str(row.get("permit_desc") or row.get("work_desc")),
        value=to_float(row.get("valuation")),
        issue_date=parse_date(row.get("issue_date")),
        status=to_str(row.get("status_current") or row.get("status_desc")),
        contractor=to_str(row.get("contractor_name") or row.get("contractors_business_name")),
    )


def parse_nyc_permit(row: dict) -> Permit:
    return Permit(
        permit_number=to_str(row.get("job__") or row.get("job_")),
        permit_type=to_str(row.get("permit_type")),
        description=to_str(row.get("work_type")),
        value=to_float(row.get("estimated_job_costs")),
        issue_date=parse_date(row.get("issuance_date") or row.get("latest_action_date")),
        status=to_str(row.get("permit_status") or row.get("job_status")),
        contractor=to_str(row.get("permittee_s_business_name") or row.get("owner_name")),
    )


def parse_generic_permit(row: dict) -> Permit:
    return Permit(
        permit_number=to_str(row.get("permitNumber") or row.get("id")),
        permit_type=to_str(row.get("type") or row.get("workType")),
        description=to_str(row.get("description") or row.get("workDescription")),
        value=to_float(row.get("value") or row.get("estimatedCost")),
        issue_date=parse_date(row.get("issueDate") or row.get("dateIssued")),
        status=to_str(row.get("status")),
        contractor=to_str(row.get("contractor") or row.get("contractorName")),
    )


PERMIT_DATASETS = (
    CityDataset("chicago", "data.cityofchicago.org", "ydr8-5enu", parse_chicago_permit),
    CityDataset("los angeles", "data.lacity.org", "nbyu-2ha9", parse_la_permit),
    CityDataset("new york", "data.cityofnewyork.us", "ipu4-2q9a", parse_nyc_permit),
)


class PermitSource(OpenDataSource):
    """Building permits for an address."""

    source_id = "permits"
    category = Category.PERMITS

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        app_token: str | None = None,
        datasets: tuple[CityDataset, ...] = PERMIT_DATASETS,
    ):
        super().__init__(client, api_key, app_token)
        self.datasets = datasets

    async def fetch(self, address: AddressParts) -> list[Permit]:
        dataset = find_city_dataset(self.datasets, address.city)
        if dataset is not None:
            permits = await self.query_dataset(dataset, address)
        else:
            permits = await self._fetch_generic(address)

        if not permits:
            raise SourceNoDataError(self.source_id, "no permits found for address")
        return permits

    async def _fetch_generic(self, address: AddressParts) -> list[Permit]:
        api_key = self.require_api_key("BUILDING_PERMITS_API_KEY")
        data = await self.get_json(
            GENERIC_PERMITS_URL,
            params={"address": address.raw},
            headers={"Authorization": f"Bearer {api_key}"},
        )
        rows = data.get("permits") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            return []
        return [parse_generic_permit(row) for row in rows if isinstance(row, dict)]
