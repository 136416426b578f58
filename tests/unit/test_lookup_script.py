"""
Unit tests for the batch lookup script helpers.
"""

import asyncio

from property_command.aggregation.models import AggregatedPropertyData
from scripts.lookup_property_data import lookup_all, read_addresses


class SlowFirstCoordinator:
    """Earlier addresses take longer, so completion order is reversed."""

    queries = ()

    def __init__(self, addresses):
        self.delays = {a: 0.01 * (len(addresses) - i) for i, a in enumerate(addresses)}

    async def aggregate(self, address):
        await asyncio.sleep(self.delays[address])
        return AggregatedPropertyData(address=address, records={})


def test_results_keep_input_order():
    addresses = ["1 A St, X, MA", "2 B St, X, MA", "3 C St, X, MA", "4 D St, X, MA"]

    results = asyncio.run(lookup_all(SlowFirstCoordinator(addresses), addresses, concurrency=4))

    assert [data.address for data in results] == addresses


def test_read_addresses_skips_comments_and_duplicates(tmp_path):
    input_file = tmp_path / "addresses.txt"
    input_file.write_text("# header\n2 B St\n\n1 A St\n", encoding="utf-8")

    assert read_addresses(["1 A St"], input_file) == ["1 A St", "2 B St"]
