"""
Command execution.

Turns a ClassifiedCommand into a CommandResult describing the effect the
caller should apply. Nothing here navigates, renders or creates a
property; the only awaited work is the optional address preview.
"""

import logging

from property_command.aggregation.coordinator import AggregationCoordinator
from property_command.commands.models import (
    AddressDetectedEffect,
    AddressPayload,
    ClassifiedCommand,
    CommandKind,
    CommandResult,
    CreateEffect,
    CreatePayload,
    DomainActionEffect,
    DomainActionPayload,
    HelpEffect,
    NavigationEffect,
    NavigationPayload,
    SearchEffect,
    SearchPayload,
)
from property_command.commands.rules import HELP_SUGGESTIONS

logger = logging.getLogger(__name__)

# Messages for domain actions that are not analyses
DOMAIN_ACTION_MESSAGES = {
    "maintenance": "Creating maintenance work order...",
    "tenant": "Opening tenant management...",
    "scheduling": "Opening scheduling...",
}


def describe_error(error: Exception) -> str:
    """Exception message, falling back to the class name when it has none."""
    return str(error).strip() or type(error).__name__


class CommandExecutor:
    """
    Execute classified commands.

    Args:
        preview_aggregator: Optional coordinator. When set, address commands
            also carry an aggregated public-data preview.
    """

    def __init__(self, preview_aggregator: AggregationCoordinator | None = None):
        self.preview_aggregator = preview_aggregator
        self._handlers = {
            CommandKind.ADDRESS: self._execute_address,
            CommandKind.NAVIGATION: self._execute_navigation,
            CommandKind.DOMAIN_ACTION: self._execute_domain_action,
            CommandKind.SEARCH: self._execute_search,
            CommandKind.HELP: self._execute_help,
            CommandKind.CREATE: self._execute_create,
        }

    async def execute(self, command: ClassifiedCommand) -> CommandResult:
        """Execute a command; never raises."""
        handler = self._handlers.get(command.kind)
        if handler is None:
            message = f"Could not understand that input: '{command.raw_input}'"
            return CommandResult.failure(message)

        try:
            return await handler(command)
        except Exception as e:
            logger.warning(f"Command {command.kind.value} failed for {command.raw_input!r}: {e!r}")
            return CommandResult.failure(f"Error executing command: {describe_error(e)}")

    async def _execute_address(self, command: ClassifiedCommand) -> CommandResult:
        payload: AddressPayload = command.payload
        address = payload.address
        preview = None
        if self.preview_aggregator is not None:
            preview = await self.preview_aggregator.aggregate(address.formatted)

        return CommandResult(
            succeeded=True,
            message=f"Processing address: {address.formatted}",
            effect=AddressDetectedEffect(address=address, preview=preview),
        )

    async def _execute_navigation(self, command: ClassifiedCommand) -> CommandResult:
        payload: NavigationPayload = command.payload
        return CommandResult(
            succeeded=True,
            message=f"Navigating to {payload.target}",
            effect=NavigationEffect(target=payload.target),
        )

    async def _execute_domain_action(self, command: ClassifiedCommand) -> CommandResult:
        payload: DomainActionPayload = command.payload
        default = f"Running {payload.action} analysis..."
        message = DOMAIN_ACTION_MESSAGES.get(payload.domain, default)
        return CommandResult(
            succeeded=True,
            message=message,
            effect=DomainActionEffect(domain=payload.domain, action=payload.action),
        )

    async def _execute_search(self, command: ClassifiedCommand) -> CommandResult:
        payload: SearchPayload = command.payload
        return CommandResult(
            succeeded=True,
            message=f"Searching for: {payload.query}",
            effect=SearchEffect(query=payload.query),
        )

    async def _execute_help(self, command: ClassifiedCommand) -> CommandResult:
        lines = "\n".join(f"• {suggestion}" for suggestion in HELP_SUGGESTIONS)
        return CommandResult(
            succeeded=True,
            message=f"Here are some things you can try:\n{lines}",
            effect=HelpEffect(suggestions=HELP_SUGGESTIONS),
        )

    async def _execute_create(self, command: ClassifiedCommand) -> CommandResult:
        payload: CreatePayload = command.payload
        return CommandResult(
            succeeded=True,
            message=f"Creating new {payload.entity}...",
            effect=CreateEffect(entity=payload.entity),
        )
