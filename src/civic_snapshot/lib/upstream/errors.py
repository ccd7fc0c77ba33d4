"""Typed error taxonomy for upstream civic-data and geocoding failures."""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable error codes surfaced in error descriptors."""

    CONFIG_ERROR = "config_error"
    INVALID_STATE = "invalid_state"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"
    INVALID_INPUT = "invalid_input"
    NOT_ATTEMPTED = "not_attempted"
    INTERNAL_ERROR = "internal_error"


class CivicDataError(Exception):
    """Base class for all errors raised while fetching civic data.

    Args:
        source: Name of the upstream source (e.g. "open_states", "zippopotam").
        message: Human-readable error description.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"{source}: {message}")


class ConfigError(CivicDataError):
    """Required configuration (e.g. an API key) is missing or invalid."""

    code = ErrorCode.CONFIG_ERROR


class InvalidStateError(CivicDataError):
    """The caller supplied an unrecognized state name or abbreviation."""

    code = ErrorCode.INVALID_STATE

    def __init__(self, state_input: str) -> None:
        self.state_input = state_input
        super().__init__("jurisdiction", f"Invalid state: {state_input!r}")


class NotFoundError(CivicDataError):
    """The upstream has no record for the requested key."""

    code = ErrorCode.NOT_FOUND


class RateLimitedError(CivicDataError):
    """The upstream kept answering 429 after all retries were spent.

    Args:
        source: Upstream source name.
        message: Human-readable error description.
        retry_after: Value of the last ``Retry-After`` header, if any.
    """

    code = ErrorCode.RATE_LIMITED

    def __init__(self, source: str, message: str, retry_after: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(source, message)


class UpstreamError(CivicDataError):
    """The upstream returned a non-2xx, non-429 status.

    Args:
        source: Upstream source name.
        status_code: HTTP status code returned by the upstream.
        body: Response body, kept for diagnostics.
    """

    code = ErrorCode.UPSTREAM_ERROR

    def __init__(self, source: str, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(source, f"HTTP {status_code}: {body[:200]}")


class TransportError(CivicDataError):
    """Network-level failure (DNS, timeout, connection reset) after all retries."""

    code = ErrorCode.TRANSPORT_ERROR


class DecodeError(CivicDataError):
    """The response body did not match the expected shape."""

    code = ErrorCode.DECODE_ERROR
