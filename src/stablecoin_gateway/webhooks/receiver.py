"""FastAPI integration for merchant servers receiving gateway webhooks."""

from collections.abc import AsyncIterator
from typing import Any

from fastapi import Request

from stablecoin_gateway.logging_config import bind_webhook_context, clear_webhook_context

from .signing import SIGNATURE_HEADER
from .verifier import DEFAULT_TOLERANCE_SECONDS, WebhookVerifier

DELIVERY_ID_HEADER = "X-Webhook-ID"


class WebhookSignatureDependency:
    """Dependency that verifies the raw body and returns the decoded event.

    Verification runs over ``await request.body()``, the bytes exactly as
    received, never over a re-serialized model. Failures raise
    ``WebhookSignatureError``; register
    :func:`stablecoin_gateway.errors.handlers.register_exception_handlers`
    to turn them into 400 responses.

    Example::

        verify_webhook = WebhookSignatureDependency(settings.webhook_secret)

        @app.post("/webhooks/stablecoin")
        async def receive(event: dict = Depends(verify_webhook)) -> dict:
            ...
    """

    def __init__(
        self,
        secret: bytes | str,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        header_name: str = SIGNATURE_HEADER,
    ) -> None:
        self.verifier = WebhookVerifier(secret, tolerance_seconds=tolerance_seconds)
        self.header_name = header_name

    async def __call__(self, request: Request) -> AsyncIterator[dict[str, Any]]:
        body = await request.body()
        delivery_id = request.headers.get(DELIVERY_ID_HEADER, "unknown")
        bind_webhook_context(delivery_id)
        try:
            event = self.verifier.construct_event(body, request.headers.get(self.header_name, ""))
            event_id = event.get("id")
            if isinstance(event_id, str):
                bind_webhook_context(delivery_id, event_id)
            yield event
        finally:
            clear_webhook_context()
