"""FastAPI exception handlers for receivers embedding the SDK."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stablecoin_gateway.errors.exceptions import (
    ApiError,
    GatewayError,
    WebhookPayloadError,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)


def _status_for(exc: GatewayError) -> int:
    if isinstance(exc, (WebhookSignatureError, WebhookPayloadError)):
        return 400
    if isinstance(exc, ApiError):
        return exc.status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Register SDK exception handlers on a FastAPI app."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        if isinstance(exc, WebhookSignatureError):
            logger.warning(
                "webhook_rejected",
                extra={
                    "path": request.url.path,
                    "reason": exc.reason.value,
                },
            )
        body = exc.to_dict()
        body["timestamp"] = datetime.now(timezone.utc).isoformat()
        return JSONResponse(status_code=_status_for(exc), content={"error": body})
