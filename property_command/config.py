"""
Configuration management for property_command.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading and validation.

Every data-source credential is optional: a missing key means the
corresponding source fails fast as "unconfigured" instead of making
a network call.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from property_command.constants import CACHE_TTL_PROPERTY_DATA, DEFAULT_HTTP_TIMEOUT

# Settings fields that hold API credentials, in source order
CREDENTIAL_FIELDS = (
    "realtymole_api_key",
    "attom_api_key",
    "rentspree_api_key",
    "realtor_api_key",
    "building_permits_api_key",
    "walkscore_api_key",
    "greatschools_api_key",
    "fbi_crime_api_key",
    "zoneomics_api_key",
    "census_api_key",
    "socrata_app_token",
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Field names map to upper-case environment variables
    (e.g. ``attom_api_key`` <- ``ATTOM_API_KEY``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Tax assessment
    realtymole_api_key: str | None = Field(
        default=None,
        description="RealtyMole API key (primary tax assessment source)",
    )
    attom_api_key: str | None = Field(
        default=None,
        description="ATTOM Data API key (tax fallback and sales history)",
    )

    # Market value / rent estimate
    rentspree_api_key: str | None = Field(
        default=None,
        description="Rentspree API key (rent estimates)",
    )
    realtor_api_key: str | None = Field(
        default=None,
        description="Realtor API key (market values)",
    )

    # Other sources
    building_permits_api_key: str | None = Field(
        default=None,
        description="Generic building permit API key (cities without open data)",
    )
    walkscore_api_key: str | None = Field(default=None, description="Walk Score API key")
    greatschools_api_key: str | None = Field(default=None, description="GreatSchools API key")
    fbi_crime_api_key: str | None = Field(
        default=None,
        description="api.data.gov key for the FBI crime data API",
    )
    zoneomics_api_key: str | None = Field(default=None, description="Zoneomics API key")

    # Optional rate-limit helpers (sources work without them)
    census_api_key: str | None = Field(default=None, description="US Census API key (optional)")
    socrata_app_token: str | None = Field(
        default=None,
        description="Socrata app token for city open-data portals (optional)",
    )

    # HTTP
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT,
        gt=0,
        description="Timeout in seconds for each source request",
    )

    # Cache
    enable_cache: bool = Field(
        default=False,
        description="Cache fulfilled source results per (address, category)",
    )
    cache_dir: Path = Field(default=Path("data/cache"), description="Cache directory")
    cache_ttl_hours: int = Field(
        default=CACHE_TTL_PROPERTY_DATA,
        ge=0,
        description="TTL for cached property data (0 disables expiry)",
    )

    @field_validator(*CREDENTIAL_FIELDS, mode="before")
    @classmethod
    def empty_string_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional fields."""
        if isinstance(v, str):
            v = v.strip()
            return v if v else None
        return v

    def configured_credentials(self) -> dict[str, bool]:
        """Report which credentials are present (never the values themselves)."""
        return {name: getattr(self, name) is not None for name in CREDENTIAL_FIELDS}


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def get_cache_dir() -> Path:
    """Get cache directory from settings."""
    return get_settings().cache_dir
