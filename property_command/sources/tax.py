"""
Tax assessment sources.

RealtyMole is the primary source; ATTOM is its fallback (wired as a
two-step chain by aggregation.factory).
"""

import logging
from typing import Any

from property_command.address import AddressParts
from property_command.domain.models import Category, TaxAssessment
from property_command.sources.base import (
    HttpSource,
    SourceNoDataError,
    parse_date,
    to_float,
    to_int,
    to_str,
)

logger = logging.getLogger(__name__)

REALTYMOLE_URL = "https://realty-mole-property-api.p.rapidapi.com/properties"
REALTYMOLE_HOST = "realty-mole-property-api.p.rapidapi.com"
ATTOM_BASE_URL = "https://api.gateway.attomdata.com/propertyapi/v1.0.0"


def _first_record(data: Any, key: str) -> dict | None:
    """First record from either a bare list or a {key: [...]} envelope."""
    records = data.get(key) if isinstance(data, dict) else data
    if isinstance(records, list) and records and isinstance(records[0], dict):
        return records[0]
    return None


def parse_realtymole_property(record: dict) -> TaxAssessment:
    """Map a RealtyMole property record to a TaxAssessment."""
    return TaxAssessment(
        assessed_value=to_float(record.get("assessedValue")),
        land_value=to_float(record.get("landValue")),
        improvement_value=to_float(record.get("improvementValue")),
        tax_amount=to_float(record.get("taxAmount")),
        mill_rate=to_float(record.get("millRate")),
        year_built=to_int(record.get("yearBuilt")),
        square_footage=to_int(record.get("squareFootage")),
        lot_size=to_float(record.get("lotSize")),
        property_type=to_str(record.get("propertyType")),
        bedrooms=to_int(record.get("bedrooms")),
        bathrooms=to_float(record.get("bathrooms")),
        stories=to_int(record.get("stories")),
        heating=to_str(record.get("heating")),
        cooling=to_str(record.get("cooling")),
        exterior=to_str(record.get("exterior")),
        roof=to_str(record.get("roof")),
        last_assessment=parse_date(record.get("lastAssessment")),
    )


def parse_attom_property(record: dict) -> TaxAssessment:
    """Map an ATTOM expanded-profile property record to a TaxAssessment."""
    assessment = record.get("assessment") or {}
    assessed = assessment.get("assessed") or {}
    tax = assessment.get("tax") or {}
    building = record.get("building") or {}
    construction = building.get("construction") or {}
    rooms = building.get("rooms") or {}
    size = building.get("size") or {}
    summary = record.get("summary") or {}
    lot = record.get("lot") or {}
    levels = (building.get("summary") or {}).get("levels")

    return TaxAssessment(
        assessed_value=to_float(assessed.get("assdttlvalue") or assessed.get("total")),
        land_value=to_float(assessed.get("assdlandvalue") or assessed.get("land")),
        improvement_value=to_float(assessed.get("assdimprvalue") or assessed.get("improvement")),
        tax_amount=to_float(tax.get("taxamt") or tax.get("taxAmt")),
        mill_rate=to_float(tax.get("taxRate")),
        year_built=to_int(summary.get("yearbuilt") or construction.get("yearBuilt")),
        square_footage=to_int(size.get("livingsize") or size.get("livingSize")),
        lot_size=to_float(lot.get("lotsize1") or lot.get("lotSize1")),
        property_type=to_str(summary.get("proptype") or summary.get("propType")),
        bedrooms=to_int(rooms.get("beds")),
        bathrooms=to_float(rooms.get("bathstotal") or rooms.get("bathsTotal")),
        stories=to_int(levels or construction.get("stories")),
        heating=to_str(construction.get("heatingType")),
        cooling=to_str(construction.get("coolingType")),
        exterior=to_str(construction.get("wallType")),
        roof=to_str(construction.get("roofType")),
        last_assessment=parse_date(assessed.get("assdDate")),
    )


def _has_any_value(record: TaxAssessment) -> bool:
    return any(value is not None for value in vars(record).values())


class RealtyMoleTaxSource(HttpSource):
    """Tax assessment from the RealtyMole property records API."""

    source_id = "realtymole"
    category = Category.TAX

    async def fetch(self, address: AddressParts) -> TaxAssessment:
        api_key = self.require_api_key("REALTYMOLE_API_KEY")
        data = await self.get_json(
            REALTYMOLE_URL,
            params={"address": address.raw},
            headers={"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": REALTYMOLE_HOST},
        )
        record = _first_record(data, "properties")
        if record is None:
            raise SourceNoDataError(self.source_id, "no property record for address")

        assessment = parse_realtymole_property(record)
        if not _has_any_value(assessment):
            raise SourceNoDataError(self.source_id, "property record had no assessment fields")
        return assessment


class AttomTaxSource(HttpSource):
    """Tax assessment from the ATTOM property expanded-profile API."""

    source_id = "attom"
    category = Category.TAX

    async def fetch(self, address: AddressParts) -> TaxAssessment:
        api_key = self.require_api_key("ATTOM_API_KEY")
        data = await self.get_json(
            f"{ATTOM_BASE_URL}/property/expandedprofile",
            params={"address1": address.street, "address2": address.city_state},
            headers={"apikey": api_key},
        )
        record = _first_record(data, "property")
        if record is None:
            raise SourceNoDataError(self.source_id, "no property record for address")

        assessment = parse_attom_property(record)
        if not _has_any_value(assessment):
            raise SourceNoDataError(self.source_id, "property record had no assessment fields")
        return assessment
