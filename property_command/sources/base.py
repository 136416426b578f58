"""
Base interface for public property data sources.

Each source fetches one category of data for an address. This is the
"plug-in" interface: implement SourceFetcher to add a data source, then
wire it into a SourceQuery (see aggregation.factory).

Sources report failure by raising one of three SourceError subclasses,
which the aggregation coordinator turns into category omission:
- SourceUnconfiguredError: a required credential is missing (no network call made)
- SourceUpstreamError: network error, non-2xx status, undecodable body
- SourceNoDataError: the call succeeded but returned nothing usable
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum
from typing import Any

import httpx

from property_command.address import AddressParts
from property_command.constants import USER_AGENT
from property_command.domain.models import Category

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Why a source produced no data."""

    UNCONFIGURED = "unconfigured"
    UPSTREAM = "upstream"
    NO_DATA = "no_data"


class SourceError(Exception):
    """Base class for data-source failures."""

    kind = FailureKind.UPSTREAM

    def __init__(self, source_id: str, reason: str):
        self.source_id = source_id
        self.reason = reason
        super().__init__(f"{source_id}: {reason}")


class SourceUnconfiguredError(SourceError):
    kind = FailureKind.UNCONFIGURED


class SourceUpstreamError(SourceError):
    kind = FailureKind.UPSTREAM


class SourceNoDataError(SourceError):
    kind = FailureKind.NO_DATA


class SourceFetcher(ABC):
    """
    Base interface for category data sources.

    Example:
        class WalkScoreSource(SourceFetcher):
            source_id = "walkscore"
            category = Category.WALKSCORE

            async def fetch(self, address: AddressParts) -> WalkScore:
                ...
    """

    source_id: str
    category: Category

    @abstractmethod
    async def fetch(self, address: AddressParts) -> Any:
        """
        Fetch this source's record for an address.

        Args:
            address: Comma-split address

        Returns:
            The category record (shape depends on category)

        Raises:
            SourceError: classified failure (any other exception is treated as upstream)
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source_id={self.source_id!r})"


class HttpSource(SourceFetcher):
    """
    SourceFetcher backed by a shared httpx.AsyncClient.

    The client is injected and owned by the caller so that all sources in
    one lookup share a connection pool.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str | None = None):
        self.client = client
        self.api_key = api_key

    def require_api_key(self, env_var: str | None = None) -> str:
        """Return the API key or fail fast as unconfigured."""
        if not self.api_key:
            name = env_var or f"{self.source_id.upper()}_API_KEY"
            raise SourceUnconfiguredError(self.source_id, f"{name} not configured")
        return self.api_key

    async def get_json(
        self,
        url: str,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            SourceUpstreamError: transport failure, non-2xx status or invalid JSON
        """
        request_headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = await self.client.get(url, params=params, headers=request_headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUpstreamError(
                self.source_id, f"HTTP {e.response.status_code} from {e.request.url.host}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceUpstreamError(self.source_id, f"request failed: {e!r}") from e

        try:
            return response.json()
        except ValueError as e:
            raise SourceUpstreamError(self.source_id, "response was not valid JSON") from e


# Lenient value coercion shared by source parsers


def parse_date(value: Any) -> date | None:
    """Parse an ISO-ish date or datetime string; anything else becomes None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def to_float(value: Any) -> float | None:
    """Convert to float, treating blanks and junk as missing."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_int(value: Any) -> int | None:
    """Convert to int (via float, so "1200.0" works), treating junk as missing."""
    number = to_float(value)
    return int(number) if number is not None else None


def to_str(value: Any) -> str | None:
    """Strip strings; blanks become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
