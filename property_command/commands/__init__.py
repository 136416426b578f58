"""
Command bar: classify free text into one intent and describe its effect.

Typical use:
    pipeline = CommandPipeline()
    result = await pipeline.submit("go to intelligence")
"""

from property_command.commands.classifier import ClassificationMetrics, CommandClassifier
from property_command.commands.executor import CommandExecutor
from property_command.commands.models import (
    ClassifiedCommand,
    CommandContext,
    CommandKind,
    CommandResult,
    Tab,
)
from property_command.commands.pipeline import CommandPipeline

__all__ = [
    "ClassificationMetrics",
    "ClassifiedCommand",
    "CommandClassifier",
    "CommandContext",
    "CommandExecutor",
    "CommandKind",
    "CommandPipeline",
    "CommandResult",
    "Tab",
]
