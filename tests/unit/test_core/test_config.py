"""Unit tests for core configuration module."""

import pytest
from pydantic import ValidationError

from civic_snapshot.core.config import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings load from environment variables."""
        monkeypatch.setenv("OPENSTATES_API_KEY", "env-key")
        monkeypatch.setenv("BILLS_CACHE_TTL", "120")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.openstates_api_key == "env-key"
        assert settings.bills_cache_ttl == 120.0

    def test_settings_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Default values are applied correctly."""
        monkeypatch.delenv("OPENSTATES_API_KEY", raising=False)
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.openstates_api_key is None
        assert settings.openstates_base_url == "https://v3.openstates.org"
        assert settings.geocoder_base_url == "https://api.zippopotam.us"
        assert settings.upstream_max_retries == 3
        assert settings.upstream_backoff_base == 2.0
        assert settings.geocode_cache_ttl == 3600.0
        assert settings.bills_cache_ttl == 600.0
        assert settings.legislators_cache_ttl == 600.0
        assert settings.bills_per_page == 10
        assert settings.bills_sort == "updated_desc"
        assert settings.log_level == "INFO"
        assert settings.api_v1_prefix == "/api/v1"
        assert settings.rate_limit_per_minute == 200
        assert settings.log_json is False
        assert settings.trusted_proxy_header_list == []

    def test_base_url_trailing_slash_stripped(self) -> None:
        settings = Settings(_env_file=None, openstates_base_url="https://v3.openstates.org/")  # type: ignore[call-arg]
        assert settings.openstates_base_url == "https://v3.openstates.org"

    def test_base_url_requires_scheme(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            Settings(_env_file=None, geocoder_base_url="api.zippopotam.us")  # type: ignore[call-arg]

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, upstream_max_retries=-1)  # type: ignore[call-arg]

    def test_zero_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, geocode_cache_ttl=0)  # type: ignore[call-arg]

    def test_unknown_bills_sort_rejected(self) -> None:
        with pytest.raises(ValidationError, match="bills_sort"):
            Settings(_env_file=None, bills_sort="alphabetical")  # type: ignore[call-arg]

    def test_cors_origin_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CORS origins string is parsed into a list."""
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://example.com")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.cors_origin_list == ["http://localhost:3000", "http://example.com"]

    def test_trusted_proxy_header_list(self) -> None:
        settings = Settings(_env_file=None, trusted_proxy_headers="X-Real-IP, ")  # type: ignore[call-arg]
        assert settings.trusted_proxy_header_list == ["X-Real-IP"]

    def test_log_json_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_JSON", "true")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.log_json is True
