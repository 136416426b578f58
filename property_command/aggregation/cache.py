"""
Per-(address, category) cache for aggregated property data.

Wraps AppCache. Only fulfilled categories are stored; a write is a plain
overwrite of the same key, so concurrent lookups of one address are safe.
"""

import logging
from typing import Any

from property_command.address import AddressParts
from property_command.cache import AppCache
from property_command.constants import CACHE_NAMESPACE_PROPERTY_DATA, CACHE_TTL_PROPERTY_DATA
from property_command.domain.models import Category

logger = logging.getLogger(__name__)


class PropertyDataCache:
    """Cache of fulfilled source results keyed by normalized address and category."""

    def __init__(
        self,
        app_cache: AppCache,
        ttl_hours: float = CACHE_TTL_PROPERTY_DATA,
        namespace: str = CACHE_NAMESPACE_PROPERTY_DATA,
    ):
        self.app_cache = app_cache
        self.ttl_hours = ttl_hours
        self.namespace = namespace

    @staticmethod
    def make_key(address: AddressParts, category: Category) -> str:
        return f"{address.normalized()}#{category.value}"

    def get(self, address: AddressParts, category: Category) -> tuple[str, Any] | None:
        """Return ``(source_id, value)`` for a cached category, or None."""
        key = self.make_key(address, category)
        entry = self.app_cache.get(self.namespace, key)
        if entry is None:
            return None
        if isinstance(entry, tuple) and len(entry) == 2:
            return entry
        logger.debug(f"Dropping malformed cache entry {key}")
        self.app_cache.delete(self.namespace, key)
        return None

    def set(self, address: AddressParts, category: Category, source_id: str, value: Any) -> None:
        self.app_cache.set(
            self.namespace,
            self.make_key(address, category),
            (source_id, value),
            ttl_hours=self.ttl_hours,
        )

    def clear(self) -> int:
        return self.app_cache.clear_namespace(self.namespace)
