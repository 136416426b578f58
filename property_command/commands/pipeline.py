"""
Command bar pipeline: classify, execute, and the confirmed creation step.

Services are constructed by the caller and passed in; nothing here is a
process-wide singleton.
"""

import logging
from typing import Any

from property_command.aggregation.coordinator import AggregationCoordinator
from property_command.commands.classifier import CommandClassifier
from property_command.commands.executor import CommandExecutor, describe_error
from property_command.commands.models import (
    CommandContext,
    CommandResult,
    PropertyCreatedEffect,
)
from property_command.creation import PropertyCreator, build_creation_input, validate_known

logger = logging.getLogger(__name__)


class CommandPipeline:
    """
    Compose classifier, executor and (optionally) property creation.

    Args:
        classifier: Intent classifier
        executor: Command executor
        aggregator: Public data coordinator for the creation step
        property_creator: Collaborator that builds the property record
    """

    def __init__(
        self,
        classifier: CommandClassifier | None = None,
        executor: CommandExecutor | None = None,
        aggregator: AggregationCoordinator | None = None,
        property_creator: PropertyCreator | None = None,
    ):
        self.classifier = classifier or CommandClassifier()
        self.executor = executor or CommandExecutor()
        self.aggregator = aggregator
        self.property_creator = property_creator

    async def submit(self, text: str, context: CommandContext | None = None) -> CommandResult:
        """Classify one input and execute it."""
        command = self.classifier.classify(text, context)
        return await self.executor.execute(command)

    async def create_property(
        self, address: str, known: dict[str, Any] | None = None
    ) -> CommandResult:
        """
        Create a property from an address the user confirmed.

        The address and ``known`` field names are checked before any paid
        lookup runs. Public data is then aggregated; fields in ``known``
        override it.
        An all-empty aggregation still creates the property, with a message
        saying no public data was found.
        """
        if self.aggregator is None or self.property_creator is None:
            return CommandResult.failure("Property creation is not configured")

        address = address.strip() if isinstance(address, str) else ""
        if not address:
            return CommandResult.failure("Failed to create property: address is empty")
        try:
            known = validate_known(known)
        except ValueError as e:
            return CommandResult.failure(f"Failed to create property: {e}")

        try:
            public_data = await self.aggregator.aggregate(address)
            creation_input = build_creation_input(address, public_data, known)
            property_record = await self.property_creator.create(creation_input)
        except Exception as e:
            logger.warning(f"Property creation failed for {address!r}: {e!r}")
            return CommandResult.failure(f"Failed to create property: {describe_error(e)}")

        if public_data.is_empty:
            message = (
                f"Property created for {creation_input.address}; "
                "could not find public data for this address"
            )
        else:
            found = len(public_data.succeeded_categories)
            message = (
                f"Property created for {creation_input.address} "
                f"with {found} public data categories"
            )

        return CommandResult(
            succeeded=True,
            message=message,
            effect=PropertyCreatedEffect(
                property_record=property_record,
                creation_input=creation_input,
                public_data=public_data,
            ),
        )
