"""Python SDK for the Stablecoin Gateway.

- webhooks: signing and verification of ``X-Webhook-Signature`` headers
- http: resilient async client with retry and backoff
- gateway: payment session and refund endpoints
"""

__version__ = "1.0.0"

from stablecoin_gateway.errors.exceptions import (  # noqa: E402
    ApiError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    RequestTimeoutError,
    WebhookPayloadError,
    WebhookSignatureError,
)
from stablecoin_gateway.gateway import StablecoinGateway  # noqa: E402
from stablecoin_gateway.http.client import ResilientClient  # noqa: E402
from stablecoin_gateway.models.enums import VerificationReason  # noqa: E402
from stablecoin_gateway.webhooks import (  # noqa: E402
    VerificationOutcome,
    WebhookVerifier,
    create_signed_payload,
    verify,
)

__all__ = [
    "ApiError",
    "ConfigurationError",
    "GatewayError",
    "NetworkError",
    "RequestTimeoutError",
    "ResilientClient",
    "StablecoinGateway",
    "VerificationOutcome",
    "VerificationReason",
    "WebhookPayloadError",
    "WebhookSignatureError",
    "WebhookVerifier",
    "__version__",
    "create_signed_payload",
    "verify",
]
