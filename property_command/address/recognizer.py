"""
Address recognition for free-text command input.

Decides whether a string denotes a US mailing address and, if so,
extracts its components. Recognition is a pure function of the input:
the same string always produces an identical result.
"""

import logging
import re
from dataclasses import dataclass, field

from property_command.address.patterns import (
    ADDRESS_PATTERNS,
    ANY_SUFFIX_RE,
    COMMON_SUFFIX_RE,
    LEADING_NUMBER_RE,
)
from property_command.constants import (
    ADDRESS_ROUTING_THRESHOLD,
    COMMON_SUFFIX_BOOST,
    HEURISTIC_ADDRESS_CONFIDENCE,
    MAX_ADDRESS_CONFIDENCE,
    MIN_ADDRESS_LENGTH,
    SHORT_STREET_LENGTH,
    SHORT_STREET_PENALTY,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressComponents:
    """Structured pieces of a recognized address. Absent pieces are None."""

    number: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    unit: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Only the components that were actually captured."""
        return {
            name: value
            for name, value in (
                ("number", self.number),
                ("street", self.street),
                ("city", self.city),
                ("state", self.state),
                ("zip", self.zip),
                ("unit", self.unit),
            )
            if value
        }


@dataclass(frozen=True)
class RecognizedAddress:
    """Result of address recognition."""

    is_address: bool
    confidence: float
    formatted: str
    components: AddressComponents = field(default_factory=AddressComponents)
    pattern: str | None = None  # Name of the pattern (or "heuristic") that matched

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")
        if self.is_address:
            if self.confidence <= ADDRESS_ROUTING_THRESHOLD:
                raise ValueError(
                    f"an address must score above {ADDRESS_ROUTING_THRESHOLD}, "
                    f"got {self.confidence}"
                )
            if not self.components.street:
                raise ValueError("an address must have a street component")


def _not_an_address(text: str) -> RecognizedAddress:
    return RecognizedAddress(is_address=False, confidence=0.0, formatted=text)


def _clean(value: str | None) -> str | None:
    """Collapse internal whitespace; empty captures become None."""
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None


def score_match(base_confidence: float, street: str) -> float:
    """
    Adjust a pattern's base confidence using the extracted street text.

    +0.05 when the street uses one of the eight most common suffixes,
    -0.10 when the street is shorter than four characters. The result
    is clamped to [0, 0.99].
    """
    confidence = base_confidence
    if COMMON_SUFFIX_RE.search(street):
        confidence += COMMON_SUFFIX_BOOST
    if len(street) < SHORT_STREET_LENGTH:
        confidence -= SHORT_STREET_PENALTY
    # Round so float noise never decides a threshold comparison
    return round(min(MAX_ADDRESS_CONFIDENCE, max(0.0, confidence)), 4)


def format_address(components: AddressComponents) -> str:
    """Rebuild "{number} {street}[, {city}, {state}][ {zip}]" from captured parts."""
    formatted = " ".join(part for part in (components.number, components.street) if part)
    if components.city and components.state:
        formatted += f", {components.city}, {components.state}"
    if components.zip:
        formatted += f" {components.zip}"
    return formatted


class AddressRecognizer:
    """
    Pattern-based mailing address recognizer.

    Patterns are tried from most to least specific and the first match
    that clears the routing threshold is returned; a more specific
    pattern always beats a less specific one, even if the latter would
    score higher after adjustments. When no pattern qualifies, a
    heuristic accepts strings that start with digits and contain a
    street suffix anywhere.

    The recognizer holds no state, so one instance can be shared or a
    fresh one built per use.
    """

    def __init__(self, patterns=ADDRESS_PATTERNS):
        self.patterns = tuple(patterns)

    def recognize(self, text: str) -> RecognizedAddress:
        """
        Recognize an address in free text.

        Args:
            text: Any input string, including empty

        Returns:
            RecognizedAddress (never raises)
        """
        if not isinstance(text, str):
            return _not_an_address("")

        trimmed = text.strip()
        if len(trimmed) < MIN_ADDRESS_LENGTH:
            return _not_an_address(text)

        for pattern in self.patterns:
            match = pattern.regex.match(trimmed)
            if not match:
                continue

            components = self._components_from_match(match)
            if not components.street:
                continue

            confidence = score_match(pattern.base_confidence, components.street)
            if confidence > ADDRESS_ROUTING_THRESHOLD:
                return RecognizedAddress(
                    is_address=True,
                    confidence=confidence,
                    formatted=format_address(components),
                    components=components,
                    pattern=pattern.name,
                )
            logger.debug(
                f"Pattern {pattern.name} matched {trimmed!r} but scored {confidence}, "
                "trying less specific patterns"
            )

        # Fallback: leading house number plus a street suffix somewhere in the text
        if LEADING_NUMBER_RE.match(trimmed) and ANY_SUFFIX_RE.search(trimmed):
            return RecognizedAddress(
                is_address=True,
                confidence=HEURISTIC_ADDRESS_CONFIDENCE,
                formatted=trimmed,
                components=AddressComponents(street=trimmed),
                pattern="heuristic",
            )

        return _not_an_address(text)

    @staticmethod
    def _components_from_match(match: re.Match) -> AddressComponents:
        groups = match.groupdict()
        state = _clean(groups.get("state"))
        return AddressComponents(
            number=_clean(groups.get("number")),
            street=_clean(groups.get("street")),
            city=_clean(groups.get("city")),
            state=state.upper() if state else None,
            zip=_clean(groups.get("zip")),
            unit=_clean(groups.get("unit")),
        )
