"""
Data models for the command pipeline.

A submitted input becomes a ClassifiedCommand (one kind, one payload
shape per kind), which the executor turns into a CommandResult carrying
an optional effect descriptor. The caller applies the effect; nothing
in this package touches the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from property_command.address import RecognizedAddress

if TYPE_CHECKING:
    from property_command.aggregation.models import AggregatedPropertyData
    from property_command.creation import PropertyCreationInput


class CommandKind(Enum):
    """Intent assigned to a submitted input."""

    ADDRESS = "address"
    NAVIGATION = "navigation"
    DOMAIN_ACTION = "domain_action"
    SEARCH = "search"
    HELP = "help"
    CREATE = "create"
    UNKNOWN = "unknown"


class Tab(Enum):
    """Dashboard tabs the command bar can be used from."""

    OVERVIEW = "overview"
    OPERATIONS = "operations"
    INTELLIGENCE = "intelligence"


class ClassificationStage(Enum):
    """Which classifier stage committed the result."""

    EMPTY_INPUT = "empty_input"
    ADDRESS = "address"
    CONTEXT_KEYWORDS = "context_keywords"
    GENERAL_KEYWORDS = "general_keywords"
    DEFAULT = "default"


@dataclass(frozen=True)
class CommandContext:
    """Read-only UI context supplied with each input."""

    active_tab: Tab | None = None

    @classmethod
    def for_tab(cls, tab: Tab | str | None) -> CommandContext:
        """Build a context from a Tab or its string value ("operations")."""
        if tab is None or isinstance(tab, Tab):
            return cls(active_tab=tab)
        return cls(active_tab=Tab(tab.strip().lower()))


# Payloads: exactly one concrete shape per command kind


@dataclass(frozen=True)
class AddressPayload:
    address: RecognizedAddress


@dataclass(frozen=True)
class NavigationPayload:
    target: str  # overview | operations | intelligence | home


@dataclass(frozen=True)
class DomainActionPayload:
    """A tab-specific action, e.g. domain="analysis", action="rent_optimization"."""

    domain: str
    action: str


@dataclass(frozen=True)
class SearchPayload:
    query: str


@dataclass(frozen=True)
class HelpPayload:
    query: str


@dataclass(frozen=True)
class CreatePayload:
    entity: str  # property | tenant | work_order | expense | document | unknown


CommandPayload = Union[
    AddressPayload,
    NavigationPayload,
    DomainActionPayload,
    SearchPayload,
    HelpPayload,
    CreatePayload,
    None,
]

PAYLOAD_TYPES: dict[CommandKind, type | None] = {
    CommandKind.ADDRESS: AddressPayload,
    CommandKind.NAVIGATION: NavigationPayload,
    CommandKind.DOMAIN_ACTION: DomainActionPayload,
    CommandKind.SEARCH: SearchPayload,
    CommandKind.HELP: HelpPayload,
    CommandKind.CREATE: CreatePayload,
    CommandKind.UNKNOWN: None,
}


@dataclass(frozen=True)
class ClassifiedCommand:
    """Result of intent classification, consumed once by the executor."""

    kind: CommandKind
    raw_input: str
    confidence: float
    payload: CommandPayload = None
    stage: ClassificationStage = ClassificationStage.DEFAULT

    def __post_init__(self):
        expected = PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.payload is not None:
                raise TypeError(f"{self.kind.value} commands carry no payload")
        elif not isinstance(self.payload, expected):
            raise TypeError(
                f"{self.kind.value} commands need a {expected.__name__}, "
                f"got {type(self.payload).__name__}"
            )


# Effects: descriptions of what the caller should do


@dataclass(frozen=True)
class AddressDetectedEffect:
    """An address was recognized; property creation awaits user confirmation."""

    address: RecognizedAddress
    preview: AggregatedPropertyData | None = None


@dataclass(frozen=True)
class NavigationEffect:
    target: str


@dataclass(frozen=True)
class DomainActionEffect:
    domain: str
    action: str


@dataclass(frozen=True)
class SearchEffect:
    query: str


@dataclass(frozen=True)
class HelpEffect:
    suggestions: tuple[str, ...]


@dataclass(frozen=True)
class CreateEffect:
    entity: str


@dataclass(frozen=True)
class PropertyCreatedEffect:
    """A property record was created from an address plus public data."""

    property_record: Any
    creation_input: PropertyCreationInput
    public_data: AggregatedPropertyData


CommandEffect = Union[
    AddressDetectedEffect,
    NavigationEffect,
    DomainActionEffect,
    SearchEffect,
    HelpEffect,
    CreateEffect,
    PropertyCreatedEffect,
]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of executing a command."""

    succeeded: bool
    message: str
    effect: CommandEffect | None = None

    def __post_init__(self):
        if not self.succeeded and not (self.message and self.message.strip()):
            raise ValueError("a failed CommandResult needs a diagnostic message")

    @classmethod
    def failure(cls, message: str) -> CommandResult:
        return cls(succeeded=False, message=message)
