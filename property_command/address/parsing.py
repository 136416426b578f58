"""
Lightweight comma-delimited address parsing for data-source lookups.

This is not a geocoding parse: "street, city, state[, zip]"
is split on commas, and a ZIP trailing the state ("MA 02101") is split
off. Anything the split cannot find is left empty.
"""

import re
from dataclasses import dataclass

_STATE_ZIP_RE = re.compile(r"^(?P<state>[A-Za-z]{2})\s+(?P<zip>\d{5}(?:-\d{4})?)$")
_ZIP_RE = re.compile(r"^\d{5}(?:-\d{4})?$")


@dataclass(frozen=True)
class AddressParts:
    """An address split into the pieces data sources query by."""

    raw: str
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""

    @property
    def city_state(self) -> str:
        """City and state joined as "City, ST" (or whichever half is known)."""
        return ", ".join(part for part in (self.city, self.state) if part)

    def normalized(self) -> str:
        """Case- and whitespace-insensitive key for this address."""
        pieces = (self.street, self.city, self.state, self.zip)
        return "|".join(" ".join(p.lower().split()) for p in pieces)


def parse_address(address: str) -> AddressParts:
    """
    Split an address string on commas.

    Args:
        address: e.g. "123 Main St, Boston, MA 02101"

    Returns:
        AddressParts (never raises; missing parts are empty strings)
    """
    raw = address.strip() if isinstance(address, str) else ""
    parts = [p.strip() for p in raw.split(",")]
    street = parts[0] if parts else ""
    city = parts[1] if len(parts) > 1 else ""
    state = parts[2] if len(parts) > 2 else ""
    zip_code = parts[3] if len(parts) > 3 else ""

    state_zip = _STATE_ZIP_RE.match(state)
    if state_zip:
        state = state_zip.group("state")
        zip_code = zip_code or state_zip.group("zip")
    elif not zip_code and _ZIP_RE.match(state):
        # "street, city, 02101"
        state, zip_code = "", state

    return AddressParts(
        raw=raw,
        street=street,
        city=city,
        state=state.upper(),
        zip=zip_code,
    )
