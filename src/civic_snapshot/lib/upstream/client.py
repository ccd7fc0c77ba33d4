"""Resilient HTTP client shared by all upstream providers.

Wraps ``httpx.AsyncClient`` with the retry state machine from ``retry.py``
and translates every failure into the typed errors from ``errors.py``.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

import httpx
from loguru import logger

from civic_snapshot.lib.upstream.errors import (
    DecodeError,
    RateLimitedError,
    TransportError,
    UpstreamError,
)
from civic_snapshot.lib.upstream.retry import (
    DEFAULT_BACKOFF_BASE,
    DEFAULT_MAX_RETRIES,
    AttemptOutcome,
    RetryAction,
    classify_status,
    next_step,
)

T = TypeVar("T")

USER_AGENT = "civic-snapshot/0.1.0"
DEFAULT_TIMEOUT = 30.0


class ResilientAPIClient:
    """GET-only JSON client with exponential backoff and typed errors.

    Args:
        source_name: Name used in logs and errors (e.g. "open_states").
        base_url: Base URL of the upstream API.
        api_key: Optional provider API key appended to every query.
        api_key_param: Query parameter name carrying the API key.
        max_retries: Default retry ceiling (retries after the first attempt).
        backoff_base: Base of the exponential backoff, in seconds.
        timeout: Per-request timeout in seconds.
        sleep: Awaitable sleep used between retries. Inject a mock in tests.
    """

    def __init__(
        self,
        source_name: str,
        base_url: str,
        *,
        api_key: str | None = None,
        api_key_param: str = "apikey",
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self.source_name = source_name
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._api_key = api_key
        self._api_key_param = api_key_param
        self._sleep = sleep or asyncio.sleep
        self._log = logger.bind(upstream=source_name)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
        )

    def build_params(self, params: Mapping[str, Any] | None = None) -> dict[str, str]:
        """Build the query string for a request.

        Drops ``None`` and empty-string values and appends the API key.
        """
        query: dict[str, str] = {}
        for key, value in (params or {}).items():
            if value is None or value == "":
                continue
            query[key] = str(value)
        if self._api_key:
            query[self._api_key_param] = self._api_key
        return query

    async def fetch(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        max_retries: int | None = None,
        decode: Callable[[Any], T] | None = None,
    ) -> Any:
        """GET ``path`` and return the decoded JSON payload.

        Args:
            path: Path relative to the base URL.
            params: Query parameters.
            max_retries: Override of the client's retry ceiling.
            decode: Optional callable turning the JSON payload into the
                expected shape. ``KeyError``, ``TypeError`` and ``ValueError``
                raised by it become a DecodeError.

        Returns:
            The JSON payload, or ``decode(payload)`` when a decoder is given.

        Raises:
            RateLimitedError: 429 persisted after all retries.
            UpstreamError: Non-2xx status (5xx after all retries).
            TransportError: Network failure after all retries.
            DecodeError: Body is not JSON or does not match the expected shape.
        """
        retries = self.max_retries if max_retries is None else max_retries
        query = self.build_params(params)

        attempt = 0
        while True:
            response: httpx.Response | None = None
            transport_error: httpx.RequestError | None = None
            try:
                response = await self._client.get(path, params=query)
                outcome = classify_status(response.status_code)
            except httpx.RequestError as exc:
                transport_error = exc
                outcome = AttemptOutcome.TRANSPORT_FAILURE

            decision = next_step(outcome, attempt, retries, self.backoff_base)

            if decision.action is RetryAction.SUCCEED:
                assert response is not None
                return self._decode(path, response, decode)

            if decision.action is RetryAction.RETRY:
                self._log.warning(
                    "{} for {} (attempt {}/{}), retrying in {:.1f}s",
                    _describe(outcome, response, transport_error),
                    path,
                    attempt + 1,
                    retries + 1,
                    decision.delay,
                )
                await self._sleep(decision.delay)
                attempt += 1
                continue

            raise self._terminal_error(path, outcome, response, transport_error, attempt)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _decode(self, path: str, response: httpx.Response, decode: Callable[[Any], T] | None) -> Any:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._log.error("Non-JSON response for {}", path)
            raise DecodeError(self.source_name, f"Invalid JSON response for {path}") from exc

        if decode is None:
            return payload
        try:
            return decode(payload)
        except DecodeError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            self._log.error("Unexpected response shape for {}: {}", path, exc)
            raise DecodeError(self.source_name, f"Unexpected response shape for {path}: {exc}") from exc

    def _terminal_error(
        self,
        path: str,
        outcome: AttemptOutcome,
        response: httpx.Response | None,
        transport_error: httpx.RequestError | None,
        attempt: int,
    ) -> Exception:
        if outcome is AttemptOutcome.TRANSPORT_FAILURE:
            self._log.error(
                "Request to {} failed after {} attempts: {}",
                path,
                attempt + 1,
                transport_error,
            )
            return TransportError(self.source_name, f"Request failed: {transport_error}")

        assert response is not None
        if outcome is AttemptOutcome.RATE_LIMITED:
            self._log.error("Still rate limited after {} attempts for {}", attempt + 1, path)
            return RateLimitedError(
                self.source_name,
                "Rate limit exceeded. Please try again in a few minutes.",
                retry_after=response.headers.get("Retry-After"),
            )

        self._log.error(
            "HTTP {} {} for {}",
            response.status_code,
            response.reason_phrase,
            path,
        )
        return UpstreamError(self.source_name, response.status_code, response.text)


def _describe(
    outcome: AttemptOutcome,
    response: httpx.Response | None,
    transport_error: httpx.RequestError | None,
) -> str:
    if response is not None:
        return f"HTTP {response.status_code}"
    return f"{outcome.value} ({transport_error!r})"
