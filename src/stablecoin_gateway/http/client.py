"""Async HTTP client with per-attempt timeouts, bounded retries and typed errors."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from stablecoin_gateway.errors.exceptions import (
    ApiError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    RequestTimeoutError,
)
from stablecoin_gateway.models.enums import RetryState

from .retry import RetryStateMachine

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_RETRIES = 3

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

AttemptHook = Callable[[int, GatewayError | None], None]


class ResilientClient:
    """Calls a JSON REST API with retry, backoff and error classification.

    Each attempt gets the full ``timeout_ms`` budget. Timeouts, transport
    failures, 5xx and 429 responses are retried up to ``max_retries`` times
    with ``min(1000 * 2**attempt, 10000)`` ms between attempts; every other
    non-2xx response is raised immediately as :class:`ApiError`.

    Cancelling the awaiting task aborts the in-flight request or the pending
    backoff sleep; ``asyncio.CancelledError`` is never converted into a
    retry.
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_attempt: AttemptHook | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ConfigurationError("base_url is required")
        if timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")
        if max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative")

        self.base_url = base_url.strip().rstrip("/")
        self.timeout_ms = timeout_ms
        self.max_retries = max_retries
        self.headers = {"Accept": "application/json", **(headers or {})}
        self._sleep = sleep
        self._on_attempt = on_attempt

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(timeout_ms / 1000),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, path: str, query: Mapping[str, Any] | None = None) -> str:
        """Join ``base_url`` and ``path``; query keys with ``None`` values are dropped."""
        url = f"{self.base_url}{path}"
        if query:
            params = {key: _query_value(value) for key, value in query.items() if value is not None}
            if params:
                url = f"{url}?{urlencode(params)}"
        return url

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Execute a logical request and return the decoded JSON body.

        Returns ``None`` for a 2xx response whose body is empty or not JSON.

        Raises:
            ApiError: Non-retryable status, or retryable status on the last attempt.
            RequestTimeoutError: The last attempt exceeded ``timeout_ms``.
            NetworkError: The last attempt failed at the transport level.
        """
        method = method.upper()
        url = self.build_url(path, query)
        request_headers = {**self.headers, **(headers or {})}
        content: bytes | None = None
        if body is not None and method in _BODY_METHODS:
            content = json.dumps(body, separators=(",", ":")).encode("utf-8")
            request_headers.setdefault("Content-Type", "application/json")

        machine = RetryStateMachine(self.max_retries)
        while True:
            try:
                data = await self._attempt(method, url, content, request_headers)
            except GatewayError as exc:
                state = machine.on_failure(exc)
                self._notify(machine.attempt, exc)
                if state is RetryState.EXHAUSTED:
                    raise
                delay_ms = machine.next_delay_ms()
                logger.warning(
                    "Retrying %s %s after %s (attempt %d/%d, delay %dms)",
                    method,
                    path,
                    exc.code,
                    machine.attempt + 1,
                    self.max_retries + 1,
                    delay_ms,
                )
                await self._sleep(delay_ms / 1000)
                machine.after_backoff()
            else:
                machine.on_success()
                self._notify(machine.attempt, None)
                return data

    async def _attempt(
        self,
        method: str,
        url: str,
        content: bytes | None,
        headers: dict[str, str],
    ) -> Any:
        try:
            async with asyncio.timeout(self.timeout_ms / 1000):
                response = await self._client.request(method, url, content=content, headers=headers)
        except TimeoutError as exc:
            raise RequestTimeoutError(self.timeout_ms) from exc
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(self.timeout_ms) from exc
        except httpx.TransportError as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        data = _decode_json(response)
        if not response.is_success:
            raise _api_error(response.status_code, data)
        return data

    def _notify(self, attempt: int, error: GatewayError | None) -> None:
        if self._on_attempt is not None:
            self._on_attempt(attempt, error)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        # Error classification is driven by the status code, not the body
        logger.debug("Response body from %s is not JSON (status %d)", response.url, response.status_code)
        return None


def _first_text(data: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _api_error(status_code: int, data: Any) -> ApiError:
    body = data if isinstance(data, dict) else {}
    return ApiError(
        _first_text(body, "detail", "message") or f"HTTP {status_code}",
        status_code,
        _first_text(body, "code") or "UNKNOWN_ERROR",
        body.get("details"),
    )
