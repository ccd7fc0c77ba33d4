"""Upstream library — resilient HTTP access and the shared error taxonomy.

Public API:
    - ResilientAPIClient: GET-only JSON client with retry/backoff
    - classify_status / next_step / backoff_delay: retry state machine
    - CivicDataError and its subclasses: typed upstream errors
    - Outcome / ErrorDescriptor: value-or-error result slots
"""

from civic_snapshot.lib.upstream.client import ResilientAPIClient
from civic_snapshot.lib.upstream.errors import (
    CivicDataError,
    ConfigError,
    DecodeError,
    ErrorCode,
    InvalidStateError,
    NotFoundError,
    RateLimitedError,
    TransportError,
    UpstreamError,
)
from civic_snapshot.lib.upstream.outcome import ErrorDescriptor, Outcome
from civic_snapshot.lib.upstream.retry import (
    AttemptOutcome,
    RetryAction,
    RetryDecision,
    backoff_delay,
    classify_status,
    next_step,
)

__all__ = [
    "AttemptOutcome",
    "CivicDataError",
    "ConfigError",
    "DecodeError",
    "ErrorCode",
    "ErrorDescriptor",
    "InvalidStateError",
    "NotFoundError",
    "Outcome",
    "RateLimitedError",
    "ResilientAPIClient",
    "RetryAction",
    "RetryDecision",
    "TransportError",
    "UpstreamError",
    "backoff_delay",
    "classify_status",
    "next_step",
]
