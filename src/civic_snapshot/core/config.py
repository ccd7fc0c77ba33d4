"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
Settings are read once and passed into constructors; business logic never
reads the environment directly.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Civic data provider (Open States API v3)
    openstates_api_key: str | None = Field(
        default=None,
        description="Open States API key for bills and legislator data",
    )
    openstates_base_url: str = Field(
        default="https://v3.openstates.org",
        description="Open States API base URL",
    )

    # Geocoding provider (Zippopotam.us)
    geocoder_base_url: str = Field(
        default="https://api.zippopotam.us",
        description="ZIP code geocoding API base URL",
    )

    @field_validator("openstates_base_url", "geocoder_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            msg = "base URLs must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/")

    # Upstream resilience
    upstream_max_retries: int = Field(
        default=3,
        description="Retries after the first attempt on 429, 5xx and transport failures",
        ge=0,
        le=10,
    )
    upstream_backoff_base: float = Field(
        default=2.0,
        description="Base of the exponential backoff in seconds (delay = base ** attempt)",
        gt=0,
    )
    upstream_timeout: float = Field(
        default=30.0,
        description="Per-request timeout in seconds",
        gt=0,
    )

    # Cache TTLs (seconds)
    geocode_cache_ttl: float = Field(
        default=3600.0,
        description="TTL for cached ZIP geocode results",
        gt=0,
    )
    bills_cache_ttl: float = Field(
        default=600.0,
        description="TTL for cached bill pages",
        gt=0,
    )
    legislators_cache_ttl: float = Field(
        default=600.0,
        description="TTL for cached legislator lookups",
        gt=0,
    )

    # Bills
    bills_per_page: int = Field(
        default=10,
        description="Bills fetched per state for a civic snapshot",
        ge=1,
        le=100,
    )
    bills_sort: str = Field(
        default="updated_desc",
        description="Open States sort order for bill searches",
    )

    @field_validator("bills_sort")
    @classmethod
    def validate_bills_sort(cls, v: str) -> str:
        from civic_snapshot.lib.legislation.open_states import BILL_SORT_OPTIONS

        if v not in BILL_SORT_OPTIONS:
            msg = f"bills_sort must be one of {sorted(BILL_SORT_OPTIONS)}"
            raise ValueError(msg)
        return v

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Write stderr logs as JSON lines instead of text",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )
    rate_limit_per_minute: int = Field(
        default=200,
        description="Maximum upstream-backed civic requests per minute per client",
        gt=0,
    )
    trusted_proxy_headers: str = Field(
        default="",
        description=(
            "Comma-separated headers trusted to carry the client IP, in priority order "
            "(e.g. X-Forwarded-For behind a reverse proxy); empty uses the socket peer"
        ),
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def trusted_proxy_header_list(self) -> list[str]:
        """Parse trusted proxy headers string into a list."""
        if not self.trusted_proxy_headers.strip():
            return []
        return [h.strip() for h in self.trusted_proxy_headers.split(",") if h.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
