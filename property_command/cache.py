"""
Disk cache for looked-up property data, using diskcache.

Keys are namespaced (``namespace:key``) so several kinds of data can share
one cache directory. TTLs are in hours because third-party property data
goes stale quickly.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import diskcache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path("data/cache")
_cache: Optional["AppCache"] = None

# Property records are small; 1 GB holds millions of category entries
DEFAULT_CACHE_SIZE_LIMIT = 1024 * 1024 * 1024

SECONDS_PER_HOUR = 3600


class AppCache:
    """Namespaced key/value cache backed by diskcache (SQLite)."""

    def __init__(
        self,
        cache_dir: Path = DEFAULT_CACHE_DIR,
        timeout: float = 30.0,
        size_limit: int = DEFAULT_CACHE_SIZE_LIMIT,
    ):
        """
        Open (or create) a cache directory.

        Args:
            cache_dir: Directory for cache files
            timeout: Seconds to wait for the SQLite lock; concurrent lookups
                     in the batch script serialize their writes through it
            size_limit: Maximum cache size in bytes (0 for unlimited)
        """
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(
            str(self.cache_dir),
            timeout=timeout,
            size_limit=size_limit,
        )

    def _make_key(self, namespace: str, key: str) -> str:
        return f"{namespace}:{key}"

    def get(self, namespace: str, key: str) -> Any | None:
        return self._cache.get(self._make_key(namespace, key))

    def set(
        self,
        namespace: str,
        key: str,
        value: Any,
        ttl_hours: float | None = None,
    ) -> None:
        """Store a value; a falsy TTL means it never expires."""
        expire = ttl_hours * SECONDS_PER_HOUR if ttl_hours else None
        self._cache.set(self._make_key(namespace, key), value, expire=expire)

    def delete(self, namespace: str, key: str) -> bool:
        return bool(self._cache.delete(self._make_key(namespace, key)))

    def clear_namespace(self, namespace: str) -> int:
        """Delete every key in a namespace and return how many were removed."""
        prefix = f"{namespace}:"
        keys_to_delete = [key for key in self._cache if key.startswith(prefix)]
        for key in keys_to_delete:
            self._cache.delete(key)
        return len(keys_to_delete)

    def count(self, namespace: str | None = None) -> int:
        if namespace is None:
            return len(self._cache)
        prefix = f"{namespace}:"
        return sum(1 for key in self._cache if key.startswith(prefix))

    def stats(self) -> dict:
        """Entry counts per namespace plus disk usage."""
        namespaces: dict[str, int] = {}
        for key in self._cache:
            ns = key.split(":")[0] if ":" in key else "unknown"
            namespaces[ns] = namespaces.get(ns, 0) + 1

        return {
            "total": len(self._cache),
            "by_namespace": namespaces,
            "size_mb": round(self._cache.volume() / (1024 * 1024), 2),
            "cache_dir": str(self.cache_dir),
        }

    def close(self):
        self._cache.close()


def get_cache(cache_dir: Path = DEFAULT_CACHE_DIR, timeout: float = 30.0) -> AppCache:
    """Get or create the process-wide cache instance."""
    global _cache
    if _cache is None:
        _cache = AppCache(cache_dir, timeout=timeout)
    return _cache
