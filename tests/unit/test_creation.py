"""
Unit tests for merging known fields with public data.
"""

import pytest

from property_command.aggregation.models import AggregatedPropertyData
from property_command.creation import (
    KNOWN_FIELDS,
    PropertyCreationInput,
    build_creation_input,
    validate_known,
)
from property_command.domain.models import Category, MarketData, TaxAssessment


def data(**records):
    return AggregatedPropertyData(
        address="1 Elm St",
        records={Category(name): value for name, value in records.items()},
    )


def test_address_only():
    creation_input = build_creation_input("  1 Elm St  ")

    assert creation_input == PropertyCreationInput(address="1 Elm St")


def test_empty_address_rejected():
    with pytest.raises(ValueError):
        build_creation_input("   ")


def test_unknown_field_rejected():
    with pytest.raises(ValueError, match="garage"):
        build_creation_input("1 Elm St", known={"garage": 2})


def test_tax_value_used_when_market_missing():
    creation_input = build_creation_input(
        "1 Elm St",
        data(tax=TaxAssessment(assessed_value=300000, square_footage=1400, property_type="Condo")),
    )

    assert creation_input.current_value == 300000
    assert creation_input.square_footage == 1400
    assert creation_input.property_type == "Condo"


def test_market_value_preferred_over_assessment():
    creation_input = build_creation_input(
        "1 Elm St",
        data(
            tax=TaxAssessment(assessed_value=300000),
            market=MarketData(estimated_value=410000),
        ),
    )

    assert creation_input.current_value == 410000


def test_market_without_value_falls_back_to_assessment():
    creation_input = build_creation_input(
        "1 Elm St",
        data(
            tax=TaxAssessment(assessed_value=300000),
            market=MarketData(rent_estimate=2100),
        ),
    )

    assert creation_input.current_value == 300000
    assert creation_input.monthly_rent == 2100


def test_known_fields_win_and_none_is_ignored():
    creation_input = build_creation_input(
        "1 Elm St",
        data(tax=TaxAssessment(year_built=1980, bedrooms=2)),
        known={"year_built": 1982, "bedrooms": None, "tenant_name": "R. Diaz"},
    )

    assert creation_input.year_built == 1982
    assert creation_input.bedrooms == 2
    assert creation_input.tenant_name == "R. Diaz"


def test_other_categories_are_not_mapped():
    creation_input = build_creation_input("1 Elm St", data(zoning="R-1", walkscore=80))

    assert creation_input == PropertyCreationInput(address="1 Elm St")


def test_known_fields_exclude_address():
    assert "address" not in KNOWN_FIELDS
    assert "monthly_rent" in KNOWN_FIELDS


def test_validate_known_drops_none_and_rejects_unknown():
    assert validate_known({"bedrooms": 3, "bathrooms": None}) == {"bedrooms": 3}
    assert validate_known(None) == {}
    with pytest.raises(ValueError, match="pool"):
        validate_known({"pool": True})
