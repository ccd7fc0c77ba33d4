"""Shared test fixtures."""

import pytest

from civic_snapshot.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Test application settings, isolated from any local .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        openstates_api_key="test-key",
        log_level="DEBUG",
    )
