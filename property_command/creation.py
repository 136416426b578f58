"""
Property creation boundary.

The command pipeline never builds a property record itself. It merges
what the user already knows with aggregated public data into a
PropertyCreationInput and hands that to a PropertyCreator collaborator.
"""

import logging
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Protocol

from property_command.aggregation.models import AggregatedPropertyData
from property_command.domain.models import Category

logger = logging.getLogger(__name__)


class PropertyCreationError(Exception):
    """Raised by a PropertyCreator when a property cannot be created."""


@dataclass(frozen=True)
class PropertyCreationInput:
    """Address plus whatever is known about the property."""

    address: str
    purchase_price: float | None = None
    current_value: float | None = None
    monthly_rent: float | None = None
    monthly_expenses: float | None = None
    year_built: int | None = None
    square_footage: int | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    property_type: str | None = None
    tenant_name: str | None = None
    lease_start: date | None = None
    lease_end: date | None = None

    def __post_init__(self):
        if not isinstance(self.address, str) or not self.address.strip():
            raise ValueError("PropertyCreationInput needs a non-empty address")


KNOWN_FIELDS = frozenset(f.name for f in fields(PropertyCreationInput)) - {"address"}


class PropertyCreator(Protocol):
    """Creates a property record; raises PropertyCreationError on failure."""

    async def create(self, creation_input: PropertyCreationInput) -> Any: ...


def _public_values(data: AggregatedPropertyData) -> dict[str, Any]:
    """Creation fields that public data can supply, skipping anything not reported."""
    tax = data.get(Category.TAX)
    market = data.get(Category.MARKET)

    values: dict[str, Any] = {}
    if market is not None:
        values["current_value"] = market.estimated_value
        values["monthly_rent"] = market.rent_estimate
    if tax is not None:
        if values.get("current_value") is None:
            values["current_value"] = tax.assessed_value
        values["year_built"] = tax.year_built
        values["square_footage"] = tax.square_footage
        values["bedrooms"] = tax.bedrooms
        values["bathrooms"] = tax.bathrooms
        values["property_type"] = tax.property_type
    return {name: value for name, value in values.items() if value is not None}


def validate_known(known: dict[str, Any] | None) -> dict[str, Any]:
    """
    Drop None values and reject names that are not creation fields.

    Raises:
        ValueError: an unrecognized known field
    """
    known = {name: value for name, value in (known or {}).items() if value is not None}
    unknown = set(known) - KNOWN_FIELDS
    if unknown:
        raise ValueError(f"Unknown property fields: {', '.join(sorted(unknown))}")
    return known


def build_creation_input(
    address: str,
    data: AggregatedPropertyData | None = None,
    known: dict[str, Any] | None = None,
) -> PropertyCreationInput:
    """
    Merge user-known fields with public data.

    Known fields always win; public data only fills the gaps.

    Raises:
        ValueError: empty address or an unrecognized known field
    """
    known = validate_known(known)

    if isinstance(address, str):
        address = address.strip()
    creation_input = PropertyCreationInput(address=address)
    if data is not None:
        public = _public_values(data)
        logger.debug(f"Public data supplied {sorted(public)} for {address}")
        creation_input = replace(creation_input, **public)
    return replace(creation_input, **known)
