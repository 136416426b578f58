"""
Data models for public property data.

One record shape per aggregation category. Fields a source does not
report are left as None rather than filled with a guess.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Category(Enum):
    """Public-data categories merged into a property lookup."""

    TAX = "tax"
    MARKET = "market"
    PERMITS = "permits"
    VIOLATIONS = "violations"
    SALES = "sales"
    DEMOGRAPHICS = "demographics"
    SCHOOLS = "schools"
    CRIME = "crime"
    WALKSCORE = "walkscore"
    FLOODZONE = "floodzone"
    ZONING = "zoning"


@dataclass(frozen=True)
class TaxAssessment:
    """County assessor record."""

    assessed_value: float | None = None
    land_value: float | None = None
    improvement_value: float | None = None
    tax_amount: float | None = None
    mill_rate: float | None = None
    year_built: int | None = None
    square_footage: int | None = None
    lot_size: float | None = None
    property_type: str | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    stories: int | None = None
    heating: str | None = None
    cooling: str | None = None
    exterior: str | None = None
    roof: str | None = None
    last_assessment: date | None = None


@dataclass(frozen=True)
class PricePoint:
    date: date | None
    price: float | None
    event: str | None = None


@dataclass(frozen=True)
class Comparable:
    address: str
    price: float | None = None
    price_per_sqft: float | None = None
    square_footage: int | None = None
    bedrooms: int | None = None
    bathrooms: float | None = None
    year_built: int | None = None
    distance: float | None = None
    sale_date: date | None = None


@dataclass(frozen=True)
class MarketData:
    """Market value and rent estimate."""

    estimated_value: float | None = None
    price_per_sqft: float | None = None
    rent_estimate: float | None = None
    rent_per_sqft: float | None = None
    appreciation_1_year: float | None = None
    appreciation_5_year: float | None = None
    days_on_market: int | None = None
    inventory: int | None = None
    price_history: tuple[PricePoint, ...] = ()
    comparables: tuple[Comparable, ...] = ()


@dataclass(frozen=True)
class Permit:
    permit_number: str | None
    permit_type: str | None
    description: str | None
    value: float | None
    issue_date: date | None
    status: str | None
    contractor: str | None = None


@dataclass(frozen=True)
class Violation:
    violation_id: str | None
    violation_type: str | None
    description: str | None
    issue_date: date | None
    status: str | None
    fine: float | None = None


@dataclass(frozen=True)
class Sale:
    sale_date: date | None
    sale_price: float | None
    price_per_sqft: float | None = None
    deed_type: str | None = None
    buyer: str | None = None
    seller: str | None = None


@dataclass(frozen=True)
class Demographics:
    """Census figures for the place (city) containing the address."""

    place_name: str
    median_household_income: int | None = None
    median_home_value: int | None = None
    median_age: float | None = None
    population: int | None = None


@dataclass(frozen=True)
class School:
    name: str
    level: str | None = None  # elementary | middle | high (or a combination)
    rating: int | None = None
    distance: float | None = None
    enrollment: int | None = None


@dataclass(frozen=True)
class CrimeStats:
    """State-level crime rates per 100,000 residents."""

    year: int
    crime_rate: float
    violent_crime_rate: float
    property_crime_rate: float
    trend: str  # increasing | decreasing | stable


@dataclass(frozen=True)
class WalkScore:
    score: int
    description: str | None = None


@dataclass(frozen=True)
class FloodZone:
    zone: str
    subtype: str | None = None


@dataclass(frozen=True)
class Zoning:
    code: str
    description: str | None = None
    extra: dict = field(default_factory=dict)
