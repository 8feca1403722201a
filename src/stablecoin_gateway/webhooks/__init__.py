"""Webhook signing and verification.

- signing.py: HMAC-SHA256 signatures and the ``t=...,v1=...`` header
- verifier.py: receiver-side verification and sender-side helpers
- receiver.py: FastAPI dependency for merchant endpoints
"""

from stablecoin_gateway.webhooks.signing import (
    SIGNATURE_HEADER,
    ParsedSignatureHeader,
    SignatureHeaderError,
    format_header,
    parse_header,
    sign,
)
from stablecoin_gateway.webhooks.verifier import (
    DEFAULT_TOLERANCE_SECONDS,
    SignedWebhook,
    VerificationOutcome,
    WebhookVerifier,
    canonical_json,
    create_signed_payload,
    signed_request,
    verify,
)

__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "SIGNATURE_HEADER",
    "ParsedSignatureHeader",
    "SignatureHeaderError",
    "SignedWebhook",
    "VerificationOutcome",
    "WebhookVerifier",
    "canonical_json",
    "create_signed_payload",
    "format_header",
    "parse_header",
    "sign",
    "signed_request",
    "verify",
]
