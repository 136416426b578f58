"""
Property Command - command bar intent classification and public property data lookup.

This package provides:
- Address recognition in free-text input
- Staged classification of command-bar input into one intent
- Execution of classified commands into effect descriptors
- Settle-all aggregation of public property data from 11 categories of sources
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# Re-export commonly used items
from property_command.address import AddressRecognizer, RecognizedAddress, parse_address
from property_command.aggregation import (
    AggregatedPropertyData,
    AggregationCoordinator,
    build_default_coordinator,
)
from property_command.commands import (
    CommandClassifier,
    CommandContext,
    CommandExecutor,
    CommandKind,
    CommandPipeline,
    CommandResult,
    Tab,
)
from property_command.config import get_settings
from property_command.domain.models import Category

__all__ = [
    "__version__",
    # Address
    "AddressRecognizer",
    "RecognizedAddress",
    "parse_address",
    # Commands
    "CommandClassifier",
    "CommandContext",
    "CommandExecutor",
    "CommandKind",
    "CommandPipeline",
    "CommandResult",
    "Tab",
    # Aggregation
    "AggregatedPropertyData",
    "AggregationCoordinator",
    "Category",
    "build_default_coordinator",
    # Config
    "get_settings",
]
