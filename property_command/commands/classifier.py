"""
Staged command classification.

Applies stages in a fixed order and stops at the first one that clears
its threshold:
1. Address: recognized address above the routing threshold
2. Context keywords: per-tab rules (must score above 0.7)
3. General keywords: navigation, help, create (must score above 0.6)
4. Default: free-form search (always succeeds)

Address detection therefore always pre-empts command interpretation, and
later stages never run once an earlier one has committed.
"""

import logging
from dataclasses import dataclass

from property_command.address import AddressRecognizer
from property_command.commands.models import (
    AddressPayload,
    ClassificationStage,
    ClassifiedCommand,
    CommandContext,
    CommandKind,
    CreatePayload,
    DomainActionPayload,
    HelpPayload,
    NavigationPayload,
    SearchPayload,
)
from property_command.commands.rules import (
    CONTEXT_RULES,
    CREATE_PREFIXES,
    HELP_WORDS,
    NAVIGATION_TARGETS,
    NAVIGATION_VERBS,
    KeywordRule,
    extract_entity_type,
)
from property_command.constants import (
    ADDRESS_ROUTING_THRESHOLD,
    CONTEXT_RULE_THRESHOLD,
    CREATE_CONFIDENCE,
    GENERAL_RULE_THRESHOLD,
    HELP_CONFIDENCE,
    NAVIGATION_CONFIDENCE,
    SEARCH_CONFIDENCE,
)

logger = logging.getLogger(__name__)


@dataclass
class ClassificationMetrics:
    """How many inputs each stage decided."""

    empty_inputs: int = 0
    address_decisions: int = 0
    context_decisions: int = 0
    general_decisions: int = 0
    default_decisions: int = 0

    def record(self, stage: ClassificationStage) -> None:
        attr = {
            ClassificationStage.EMPTY_INPUT: "empty_inputs",
            ClassificationStage.ADDRESS: "address_decisions",
            ClassificationStage.CONTEXT_KEYWORDS: "context_decisions",
            ClassificationStage.GENERAL_KEYWORDS: "general_decisions",
            ClassificationStage.DEFAULT: "default_decisions",
        }[stage]
        setattr(self, attr, getattr(self, attr) + 1)

    def total(self) -> int:
        return (
            self.empty_inputs
            + self.address_decisions
            + self.context_decisions
            + self.general_decisions
            + self.default_decisions
        )


class CommandClassifier:
    """
    Assigns exactly one command kind to free-text input.

    The recognizer and rule tables are injected so tests can build
    isolated instances; nothing here is process-global.
    """

    def __init__(
        self,
        recognizer: AddressRecognizer | None = None,
        context_rules: dict | None = None,
    ):
        """
        Initialize the classifier.

        Args:
            recognizer: Address recognizer for the first stage
            context_rules: Per-tab keyword rules (defaults to CONTEXT_RULES)
        """
        self.recognizer = recognizer or AddressRecognizer()
        self.context_rules = CONTEXT_RULES if context_rules is None else context_rules
        self.metrics = ClassificationMetrics()

    def classify(self, text: str, context: CommandContext | None = None) -> ClassifiedCommand:
        """
        Classify an input.

        Args:
            text: Raw command-bar input
            context: UI context (active tab); None means no tab

        Returns:
            ClassifiedCommand (never raises)
        """
        context = context or CommandContext()
        raw = text if isinstance(text, str) else ""
        trimmed = raw.strip()

        if not trimmed:
            return self._commit(
                ClassifiedCommand(
                    kind=CommandKind.UNKNOWN,
                    raw_input=raw,
                    confidence=0.0,
                    stage=ClassificationStage.EMPTY_INPUT,
                )
            )

        # Stage 1: address detection
        address_command = self._address_stage(trimmed)
        if address_command:
            return self._commit(address_command)

        # Stage 2: tab-specific keywords
        context_command = self._context_stage(trimmed, context)
        if context_command and context_command.confidence > CONTEXT_RULE_THRESHOLD:
            return self._commit(context_command)

        # Stage 3: general keywords
        general_command = self._general_stage(trimmed)
        if general_command and general_command.confidence > GENERAL_RULE_THRESHOLD:
            return self._commit(general_command)

        # Stage 4: free-form search
        return self._commit(
            ClassifiedCommand(
                kind=CommandKind.SEARCH,
                raw_input=trimmed,
                confidence=SEARCH_CONFIDENCE,
                payload=SearchPayload(query=trimmed),
                stage=ClassificationStage.DEFAULT,
            )
        )

    def _commit(self, command: ClassifiedCommand) -> ClassifiedCommand:
        self.metrics.record(command.stage)
        logger.debug(
            f"Classified {command.raw_input!r} as {command.kind.value} "
            f"({command.confidence:.2f}, {command.stage.value})"
        )
        return command

    def _address_stage(self, text: str) -> ClassifiedCommand | None:
        recognized = self.recognizer.recognize(text)
        if recognized.is_address and recognized.confidence > ADDRESS_ROUTING_THRESHOLD:
            return ClassifiedCommand(
                kind=CommandKind.ADDRESS,
                raw_input=text,
                confidence=recognized.confidence,
                payload=AddressPayload(address=recognized),
                stage=ClassificationStage.ADDRESS,
            )
        return None

    def _context_stage(self, text: str, context: CommandContext) -> ClassifiedCommand | None:
        if context.active_tab is None:
            return None

        lowered = text.lower()
        rules: tuple[KeywordRule, ...] = self.context_rules.get(context.active_tab, ())
        for rule in rules:
            if rule.matches(lowered):
                return ClassifiedCommand(
                    kind=CommandKind.DOMAIN_ACTION,
                    raw_input=text,
                    confidence=rule.confidence,
                    payload=DomainActionPayload(domain=rule.domain, action=rule.action),
                    stage=ClassificationStage.CONTEXT_KEYWORDS,
                )
        return None

    def _general_stage(self, text: str) -> ClassifiedCommand | None:
        lowered = text.lower()

        # Navigation: a navigation verb plus a known target
        if any(verb in lowered for verb in NAVIGATION_VERBS):
            for target in NAVIGATION_TARGETS:
                if target in lowered:
                    return ClassifiedCommand(
                        kind=CommandKind.NAVIGATION,
                        raw_input=text,
                        confidence=NAVIGATION_CONFIDENCE,
                        payload=NavigationPayload(target=target),
                        stage=ClassificationStage.GENERAL_KEYWORDS,
                    )

        if any(word in lowered for word in HELP_WORDS):
            return ClassifiedCommand(
                kind=CommandKind.HELP,
                raw_input=text,
                confidence=HELP_CONFIDENCE,
                payload=HelpPayload(query=text),
                stage=ClassificationStage.GENERAL_KEYWORDS,
            )

        if lowered.startswith(CREATE_PREFIXES):
            return ClassifiedCommand(
                kind=CommandKind.CREATE,
                raw_input=text,
                confidence=CREATE_CONFIDENCE,
                payload=CreatePayload(entity=extract_entity_type(lowered)),
                stage=ClassificationStage.GENERAL_KEYWORDS,
            )

        return None
