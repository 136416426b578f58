#!/usr/bin/env python3
"""
Look up public property data for a list of addresses.

This script:
1. Reads addresses from the command line and/or a file (one per line)
2. Aggregates all 11 public data categories for each address concurrently
3. Writes one JSON line per address (records plus failure reasons)

Sources without a configured API key are skipped as "unconfigured";
see property_command/config.py for the credential variables.

Usage:
    python scripts/lookup_property_data.py --input addresses.txt             # Dry-run (plan only)
    python scripts/lookup_property_data.py --input addresses.txt --execute   # Actually look up
    python scripts/lookup_property_data.py "123 Main St, Boston, MA 02101" --execute --use-cache
"""

import argparse
import asyncio
import json
import time
from pathlib import Path

from tqdm import tqdm

from property_command.aggregation import (
    AggregationCoordinator,
    build_default_coordinator,
    make_http_client,
)
from property_command.aggregation.factory import build_default_cache
from property_command.cli.args import add_execute_argument, add_verbose_argument
from property_command.cli.logging import (
    print_dry_run_header,
    print_execute_header,
    setup_logging,
)
from property_command.config import get_settings
from property_command.constants import DEFAULT_LOOKUP_CONCURRENCY

DEFAULT_OUTPUT = Path("data/property_data.jsonl")


def read_addresses(addresses: list[str], input_file: Path | None) -> list[str]:
    """Addresses from args then file, blank lines and '#' comments skipped, duplicates dropped."""
    collected = list(addresses)
    if input_file is not None:
        for line in input_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                collected.append(line)
    return list(dict.fromkeys(a.strip() for a in collected if a.strip()))


async def lookup_all(
    coordinator: AggregationCoordinator,
    addresses: list[str],
    concurrency: int,
) -> list:
    """Aggregate every address, at most ``concurrency`` at a time, with a progress bar."""
    semaphore = asyncio.Semaphore(concurrency)

    async def lookup(index: int, address: str):
        async with semaphore:
            return index, await coordinator.aggregate(address)

    # Results keep input order; the bar advances in completion order
    results = [None] * len(addresses)
    tasks = [asyncio.create_task(lookup(i, address)) for i, address in enumerate(addresses)]
    with tqdm(total=len(tasks), desc="Looking up", unit="address") as pbar:
        for future in asyncio.as_completed(tasks):
            index, data = await future
            results[index] = data
            pbar.set_postfix(categories=f"{len(data.records)}/{len(coordinator.queries)}")
            pbar.update(1)
    return results


async def run_lookup(args, logger) -> int:
    settings = get_settings()
    cache = build_default_cache(settings) if args.use_cache else None

    start_time = time.time()
    try:
        async with make_http_client(settings) as client:
            coordinator = build_default_coordinator(client, settings, cache=cache)
            results = await lookup_all(coordinator, args.addresses, args.concurrency)
    finally:
        if cache is not None:
            cache.app_cache.close()

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as f:
        for data in results:
            f.write(json.dumps(data.to_dict(), default=str) + "\n")

    empty = sum(1 for data in results if data.is_empty)
    elapsed = time.time() - start_time
    logger.info("=" * 70)
    logger.info("Lookup Complete")
    logger.info("=" * 70)
    logger.info(f"  Addresses: {len(results)}")
    logger.info(f"  With no public data: {empty}")
    logger.info(f"  Output: {args.output}")
    logger.info(f"  Time: {elapsed:.1f}s")
    return 0


def main():
    """Run the property data lookup script."""
    parser = argparse.ArgumentParser(description="Look up public property data for addresses")
    parser.add_argument("addresses", nargs="*", help="Addresses (\"street, city, ST zip\")")
    parser.add_argument("--input", type=Path, help="File with one address per line")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"JSON lines output file (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_LOOKUP_CONCURRENCY,
        help=f"Addresses looked up at once (default: {DEFAULT_LOOKUP_CONCURRENCY})",
    )
    parser.add_argument(
        "--use-cache",
        action="store_true",
        help="Reuse and store fulfilled categories in the disk cache",
    )
    add_execute_argument(parser)
    add_verbose_argument(parser)
    args = parser.parse_args()

    logger = setup_logging("lookup_property_data", execute=args.execute, verbose=args.verbose)
    args.addresses = read_addresses(args.addresses, args.input)
    if not args.addresses:
        parser.error("no addresses given (pass them as arguments or with --input)")
    if args.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    settings = get_settings()
    configured = [name for name, present in settings.configured_credentials().items() if present]

    if not args.execute:
        print_dry_run_header("Property Data Lookup", logger)
        logger.info(f"Would look up {len(args.addresses)} addresses")
        logger.info(f"Concurrency: {args.concurrency}")
        logger.info(f"Configured credentials: {', '.join(configured) or 'none'}")
        logger.info(f"Cache: {'on' if args.use_cache else 'off'}")
        logger.info(f"Output: {args.output}")
        return

    print_execute_header("Property Data Lookup", logger)
    logger.info(f"Configured credentials: {', '.join(configured) or 'none'}")
    raise SystemExit(asyncio.run(run_lookup(args, logger)))


if __name__ == "__main__":
    main()
