"""Stablecoin Gateway SDK client.

Example::

    async with StablecoinGateway("sk_live_...") as gateway:
        session = await gateway.create_payment_session(
            CreatePaymentSessionParams(amount=100, merchant_address="0x742d..."),
        )
        print(session.checkout_url)
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from stablecoin_gateway import __version__
from stablecoin_gateway.config import DEFAULT_BASE_URL, Settings
from stablecoin_gateway.errors.exceptions import ConfigurationError
from stablecoin_gateway.http.client import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_MS, ResilientClient
from stablecoin_gateway.models.payments import (
    CreatePaymentSessionParams,
    CreateRefundParams,
    ListPaymentSessionsParams,
    ListRefundsParams,
    PaginatedResponse,
    PaymentSession,
    Refund,
)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def _require_id(value: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{label} is required")
    return quote(value, safe="")


class StablecoinGateway:
    """Typed access to the gateway's payment session and refund endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
        client: ResilientClient | None = None,
    ) -> None:
        if not isinstance(api_key, str) or not api_key:
            raise ConfigurationError("API key is required")
        if not api_key.strip():
            raise ConfigurationError("API key cannot be empty")

        self._client = client or ResilientClient(
            base_url,
            timeout_ms=timeout_ms,
            max_retries=max_retries,
            headers={
                "Authorization": f"Bearer {api_key}",
                "User-Agent": f"stablecoin-gateway-sdk-python/{__version__}",
            },
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> StablecoinGateway:
        return cls(
            settings.api_key,
            base_url=settings.base_url,
            timeout_ms=settings.timeout_ms,
            max_retries=settings.max_retries,
            **kwargs,
        )

    async def __aenter__(self) -> StablecoinGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> Any:
        if not idempotency_key:
            return await self._client.request(method, path, body=body, query=query)
        headers = {IDEMPOTENCY_HEADER: idempotency_key}
        with structlog.contextvars.bound_contextvars(idempotency_key=idempotency_key):
            return await self._client.request(method, path, body=body, query=query, headers=headers)

    # --- Payment sessions ---

    async def create_payment_session(self, params: CreatePaymentSessionParams) -> PaymentSession:
        """Create a payment session.

        ``idempotency_key`` travels in the ``Idempotency-Key`` header so the
        gateway can deduplicate retried creations; it is never sent in the body.
        """
        body = params.model_dump(mode="json", exclude_none=True, exclude={"idempotency_key"})
        data = await self._send(
            "POST", "/v1/payment-sessions", body=body, idempotency_key=params.idempotency_key
        )
        return PaymentSession.model_validate(data)

    async def get_payment_session(self, session_id: str) -> PaymentSession:
        path = f"/v1/payment-sessions/{_require_id(session_id, 'Payment session ID')}"
        return PaymentSession.model_validate(await self._send("GET", path))

    async def list_payment_sessions(
        self, params: ListPaymentSessionsParams | None = None
    ) -> PaginatedResponse[PaymentSession]:
        query = (params or ListPaymentSessionsParams()).model_dump(mode="json")
        data = await self._send("GET", "/v1/payment-sessions", query=query)
        return PaginatedResponse[PaymentSession].model_validate(data)

    # --- Refunds ---

    async def create_refund(self, params: CreateRefundParams) -> Refund:
        _require_id(params.payment_session_id, "Payment session ID")
        body = params.model_dump(mode="json", exclude_none=True, exclude={"idempotency_key"})
        data = await self._send("POST", "/v1/refunds", body=body, idempotency_key=params.idempotency_key)
        return Refund.model_validate(data)

    async def get_refund(self, refund_id: str) -> Refund:
        path = f"/v1/refunds/{_require_id(refund_id, 'Refund ID')}"
        return Refund.model_validate(await self._send("GET", path))

    async def list_refunds(self, params: ListRefundsParams | None = None) -> PaginatedResponse[Refund]:
        query = (params or ListRefundsParams()).model_dump(mode="json")
        data = await self._send("GET", "/v1/refunds", query=query)
        return PaginatedResponse[Refund].model_validate(data)
