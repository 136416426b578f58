#!/usr/bin/env python3
"""
Classify (and optionally execute) one command-bar input.

Dry-run mode classifies only: no network calls are made. With --execute
the command is executed; an address input also previews public data for
that address from every configured source.

Usage:
    python scripts/run_command.py "go to intelligence"
    python scripts/run_command.py --tab operations "schedule maintenance"
    python scripts/run_command.py --execute "123 Main St, Boston, MA 02101"
"""

import argparse
import asyncio

from property_command.aggregation import build_default_coordinator, make_http_client
from property_command.cli.args import (
    add_execute_argument,
    add_tab_argument,
    add_verbose_argument,
)
from property_command.cli.logging import (
    print_dry_run_header,
    print_execute_header,
    setup_logging,
)
from property_command.commands import (
    CommandClassifier,
    CommandContext,
    CommandExecutor,
    CommandPipeline,
)
from property_command.commands.models import AddressDetectedEffect
from property_command.config import get_settings


def log_classification(command, logger) -> None:
    logger.info(f"  Kind:       {command.kind.value}")
    logger.info(f"  Confidence: {command.confidence:.2f}")
    logger.info(f"  Stage:      {command.stage.value}")
    if command.payload is not None:
        logger.info(f"  Payload:    {command.payload}")


def log_preview(preview, logger) -> None:
    logger.info("")
    logger.info(f"Public data: {len(preview.records)}/{len(preview.outcomes)} categories")
    for outcome in preview.outcomes:
        if outcome.fulfilled:
            origin = " (cached)" if outcome.from_cache else ""
            logger.info(f"  ✓ {outcome.category.value}: {outcome.source_id}{origin}")
        else:
            logger.info(f"  ✗ {outcome.category.value}: {outcome.error}")


async def execute_command(text: str, context: CommandContext, logger) -> int:
    settings = get_settings()
    async with make_http_client(settings) as client:
        coordinator = build_default_coordinator(client, settings)
        pipeline = CommandPipeline(executor=CommandExecutor(preview_aggregator=coordinator))
        result = await pipeline.submit(text, context)

    status = "OK" if result.succeeded else "FAILED"
    logger.info(f"[{status}] {result.message}")
    if isinstance(result.effect, AddressDetectedEffect) and result.effect.preview is not None:
        log_preview(result.effect.preview, logger)
    return 0 if result.succeeded else 1


def main():
    """Run the command classifier."""
    parser = argparse.ArgumentParser(description="Classify and execute a command-bar input")
    parser.add_argument("text", nargs="+", help="Command-bar input")
    add_tab_argument(parser)
    add_execute_argument(parser)
    add_verbose_argument(parser)
    args = parser.parse_args()

    logger = setup_logging("run_command", execute=args.execute, verbose=args.verbose)
    text = " ".join(args.text)
    context = CommandContext.for_tab(args.tab)

    if not args.execute:
        print_dry_run_header("Command Classification", logger)
        logger.info(f"Input: {text!r} (tab: {args.tab or 'none'})")
        log_classification(CommandClassifier().classify(text, context), logger)
        logger.info("")
        logger.info("Run with --execute to execute the command (addresses preview public data)")
        return

    print_execute_header("Command Execution", logger)
    logger.info(f"Input: {text!r} (tab: {args.tab or 'none'})")
    raise SystemExit(asyncio.run(execute_command(text, context, logger)))


if __name__ == "__main__":
    main()
