"""
Address recognition and parsing.

- AddressRecognizer: decides whether free text is a mailing address
- parse_address: comma-split of an address for data-source queries
"""

from property_command.address.parsing import AddressParts, parse_address
from property_command.address.recognizer import (
    AddressComponents,
    AddressRecognizer,
    RecognizedAddress,
)

__all__ = [
    "AddressComponents",
    "AddressParts",
    "AddressRecognizer",
    "RecognizedAddress",
    "parse_address",
]
