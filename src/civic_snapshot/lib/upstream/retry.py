"""Retry state machine for upstream GET requests.

Each attempt is classified into an ``AttemptOutcome``; ``next_step`` maps the
outcome and the attempt counter to the next transition:

    Attempting -> SUCCEED
    Attempting -> RETRY(delay) -> Attempting
    Attempting -> FAIL

The HTTP plumbing in ``client.py`` only executes these decisions, so the
backoff schedule and terminal conditions can be tested without a network.
"""

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE = 2.0


class AttemptOutcome(StrEnum):
    """Classification of a single request attempt."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    TRANSPORT_FAILURE = "transport_failure"


# Outcomes that may be retried while attempts remain
RETRYABLE_OUTCOMES: frozenset[AttemptOutcome] = frozenset(
    {
        AttemptOutcome.RATE_LIMITED,
        AttemptOutcome.SERVER_ERROR,
        AttemptOutcome.TRANSPORT_FAILURE,
    }
)


class RetryAction(StrEnum):
    """Transition taken after an attempt."""

    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


@dataclass(frozen=True)
class RetryDecision:
    """Next transition of the retry loop.

    ``delay`` is only set for ``RetryAction.RETRY``.
    """

    action: RetryAction
    outcome: AttemptOutcome
    delay: float | None = None


def classify_status(status_code: int) -> AttemptOutcome:
    """Classify an HTTP status code into an attempt outcome.

    Args:
        status_code: HTTP status code of the response.

    Returns:
        The matching AttemptOutcome.
    """
    if 200 <= status_code < 300:
        return AttemptOutcome.SUCCESS
    if status_code == 429:
        return AttemptOutcome.RATE_LIMITED
    if status_code >= 500:
        return AttemptOutcome.SERVER_ERROR
    return AttemptOutcome.CLIENT_ERROR


def backoff_delay(attempt: int, base: float = DEFAULT_BACKOFF_BASE) -> float:
    """Exponential backoff delay in seconds for a zero-based attempt number.

    With the default base this yields 1s, 2s, 4s for attempts 0, 1, 2.
    """
    if attempt < 0:
        msg = f"attempt must be >= 0, got {attempt}"
        raise ValueError(msg)
    return float(base**attempt)


def next_step(
    outcome: AttemptOutcome,
    attempt: int,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_base: float = DEFAULT_BACKOFF_BASE,
) -> RetryDecision:
    """Compute the transition that follows an attempt.

    Args:
        outcome: Classification of the attempt that just finished.
        attempt: Zero-based number of that attempt.
        max_retries: Retries allowed after the first attempt.
        backoff_base: Base of the exponential backoff.

    Returns:
        A RetryDecision describing the next step.
    """
    if outcome is AttemptOutcome.SUCCESS:
        return RetryDecision(RetryAction.SUCCEED, outcome)
    if outcome in RETRYABLE_OUTCOMES and attempt < max_retries:
        return RetryDecision(RetryAction.RETRY, outcome, delay=backoff_delay(attempt, backoff_base))
    return RetryDecision(RetryAction.FAIL, outcome)
