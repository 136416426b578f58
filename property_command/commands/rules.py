"""
Keyword rule tables for command classification.

Matching is plain lower-case substring search. Within a table, rules are
checked in the order listed and the first hit wins.
"""

from dataclasses import dataclass

from property_command.commands.models import Tab
from property_command.constants import (
    CREATE_CONFIDENCE,
    HELP_CONFIDENCE,
    NAVIGATION_CONFIDENCE,
)


@dataclass(frozen=True)
class KeywordRule:
    """Maps any of several substrings to a domain action."""

    keywords: tuple[str, ...]
    domain: str
    action: str
    confidence: float

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)


# Tab-specific rules: only consulted when the input comes from that tab
CONTEXT_RULES: dict[Tab, tuple[KeywordRule, ...]] = {
    Tab.OVERVIEW: (
        KeywordRule(("health", "score"), "analysis", "health", 0.8),
        KeywordRule(("alert", "issue"), "analysis", "alerts", 0.8),
    ),
    Tab.OPERATIONS: (
        KeywordRule(("maintenance", "repair"), "maintenance", "create_work_order", 0.9),
        KeywordRule(("tenant", "lease"), "tenant", "tenant_management", 0.9),
        KeywordRule(("schedule", "appointment"), "scheduling", "schedule", 0.8),
    ),
    Tab.INTELLIGENCE: (
        KeywordRule(("market", "comp", "value"), "analysis", "market", 0.9),
        KeywordRule(("rent", "pricing"), "analysis", "rent_optimization", 0.9),
        KeywordRule(("expense", "cost"), "analysis", "expenses", 0.8),
    ),
}

# General (tab-independent) rules
NAVIGATION_VERBS = ("go to", "navigate", "show")
NAVIGATION_TARGETS = ("overview", "operations", "intelligence", "home")
HELP_WORDS = ("help", "how", "what")
CREATE_PREFIXES = ("create", "add", "new")

# Entity vocabulary for create commands, checked in order
CREATE_ENTITIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("property", ("property",)),
    ("tenant", ("tenant",)),
    ("work_order", ("work order", "work_order", "maintenance")),
    ("expense", ("expense",)),
    ("document", ("document",)),
)
UNKNOWN_ENTITY = "unknown"

GENERAL_CONFIDENCES = {
    "navigation": NAVIGATION_CONFIDENCE,
    "help": HELP_CONFIDENCE,
    "create": CREATE_CONFIDENCE,
}

HELP_SUGGESTIONS = (
    'Type an address like "123 Main Street"',
    'Navigate with "go to operations"',
    'Create work orders with "schedule maintenance"',
    "Ask about market value or rent optimization",
)


def extract_entity_type(lowered: str) -> str:
    """Pick the entity a create command refers to, or "unknown"."""
    for entity, keywords in CREATE_ENTITIES:
        if any(keyword in lowered for keyword in keywords):
            return entity
    return UNKNOWN_ENTITY
