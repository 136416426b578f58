"""
Regex patterns for US mailing address recognition.

Patterns are ordered from most to least specific. The recognizer walks
them in order and the first one that matches wins, so the order here is
the tie-break.
"""

import re
from dataclasses import dataclass

# Full suffix vocabulary, used by the no-pattern fallback heuristic
STREET_SUFFIXES = (
    "Street",
    "St",
    "Avenue",
    "Ave",
    "Road",
    "Rd",
    "Drive",
    "Dr",
    "Lane",
    "Ln",
    "Boulevard",
    "Blvd",
    "Circle",
    "Cir",
    "Court",
    "Ct",
    "Place",
    "Pl",
    "Way",
    "Parkway",
    "Pkwy",
    "Trail",
    "Tr",
)

# The eight most common suffixes earn a confidence boost
COMMON_STREET_SUFFIXES = STREET_SUFFIXES[:8]

# Suffixes accepted inside the structured patterns (Trail/Tr only count in the fallback)
_PATTERN_SUFFIXES = "|".join(STREET_SUFFIXES[:21])

_NUMBER = r"(?P<number>\d+)"
_STREET = rf"(?P<street>[A-Za-z\s]+(?:{_PATTERN_SUFFIXES}))"
_CITY = r"(?P<city>[A-Za-z\s]+)"
_STATE = r"(?P<state>[A-Z]{2})"
_ZIP = r"(?P<zip>\d{5}(?:-\d{4})?)"
_UNIT = r"(?:Apt|Apartment|Unit|#)\s*(?P<unit>[A-Za-z0-9]+)"


@dataclass(frozen=True)
class AddressPattern:
    """A named address regex with the base confidence it earns on a match."""

    name: str
    regex: re.Pattern
    base_confidence: float


ADDRESS_PATTERNS: tuple[AddressPattern, ...] = (
    # "123 Main St, Boston MA 02101"
    AddressPattern(
        "street_city_state_zip",
        re.compile(rf"^{_NUMBER}\s+{_STREET},?\s+{_CITY},?\s+{_STATE}\s+{_ZIP}\b", re.I),
        0.98,
    ),
    # "123 Main St, Boston MA"
    AddressPattern(
        "street_city_state",
        re.compile(rf"^{_NUMBER}\s+{_STREET},?\s+{_CITY},?\s+{_STATE}\b", re.I),
        0.95,
    ),
    # "789 Pine Road Apt 4B"
    AddressPattern(
        "street_unit",
        re.compile(rf"^{_NUMBER}\s+{_STREET}\s+{_UNIT}", re.I),
        0.85,
    ),
    # "456 Oak Avenue"
    AddressPattern(
        "street",
        re.compile(rf"^{_NUMBER}\s+{_STREET}\b", re.I),
        0.90,
    ),
    # "123 Main"
    AddressPattern(
        "number_words",
        re.compile(rf"^{_NUMBER}\s+(?P<street>[A-Za-z\s]{{2,}})\b", re.I),
        0.70,
    ),
)

LEADING_NUMBER_RE = re.compile(r"^\d+")
ANY_SUFFIX_RE = re.compile(rf"\b(?:{'|'.join(STREET_SUFFIXES)})\b", re.I)
COMMON_SUFFIX_RE = re.compile(rf"\b(?:{'|'.join(COMMON_STREET_SUFFIXES)})\b", re.I)
