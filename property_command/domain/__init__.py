"""Public property data categories and record shapes."""

from property_command.domain.models import (
    Category,
    Comparable,
    CrimeStats,
    Demographics,
    FloodZone,
    MarketData,
    Permit,
    PricePoint,
    Sale,
    School,
    TaxAssessment,
    Violation,
    WalkScore,
    Zoning,
)

__all__ = [
    "Category",
    "Comparable",
    "CrimeStats",
    "Demographics",
    "FloodZone",
    "MarketData",
    "Permit",
    "PricePoint",
    "Sale",
    "School",
    "TaxAssessment",
    "Violation",
    "WalkScore",
    "Zoning",
]
