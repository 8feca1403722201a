"""Webhook verification for receivers and signing helpers for senders."""

import hmac
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from stablecoin_gateway.errors.exceptions import (
    ConfigurationError,
    WebhookPayloadError,
    WebhookSignatureError,
)
from stablecoin_gateway.models.enums import VerificationReason

from .signing import (
    SIGNATURE_HEADER,
    SignatureHeaderError,
    format_header,
    parse_header,
    sign,
)

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_SECONDS = 300


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of a single verification: valid, or invalid with one reason."""

    valid: bool
    reason: VerificationReason | None = None
    timestamp: int | None = None

    @classmethod
    def ok(cls, timestamp: int) -> "VerificationOutcome":
        return cls(valid=True, timestamp=timestamp)

    @classmethod
    def invalid(cls, reason: VerificationReason) -> "VerificationOutcome":
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class SignedWebhook:
    """Exact body bytes and headers a sender puts on the wire."""

    body: bytes
    timestamp: int
    signature: str
    headers: dict[str, str] = field(default_factory=dict)


def canonical_json(data: dict[str, Any]) -> bytes:
    """Serialize once, deterministically, for signing and sending."""
    return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")


def _signatures_match(expected: str, provided: str) -> bool:
    expected_bytes = expected.encode("ascii")
    provided_bytes = provided.encode("utf-8")
    # Length is public (fixed 64 hex chars); only the content must be timing-safe
    if len(expected_bytes) != len(provided_bytes):
        return False
    return hmac.compare_digest(expected_bytes, provided_bytes)


def verify(
    payload: bytes | str,
    header_value: str,
    secret: bytes | str,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> VerificationOutcome:
    """Verify a webhook payload against its ``X-Webhook-Signature`` header.

    Checks run cheapest first and the first failing check decides the
    reason: missing inputs, header shape, freshness, then the timing-safe
    signature comparison. Freshness is symmetric, so a timestamp too far in
    the future is rejected exactly like a stale one.

    Args:
        payload: Raw request body as received.
        header_value: Value of the signature header.
        secret: Shared webhook secret.
        tolerance_seconds: Maximum allowed ``|now - timestamp|``.
        now: Epoch seconds to verify against. Defaults to the wall clock.
    """
    if not payload or not header_value or not secret:
        return VerificationOutcome.invalid(VerificationReason.MISSING_PARAMETER)

    try:
        parsed = parse_header(header_value)
    except SignatureHeaderError as exc:
        logger.debug("Rejecting webhook header: %s", exc)
        return VerificationOutcome.invalid(VerificationReason.MALFORMED_HEADER)

    current = int(time.time() if now is None else now)
    if abs(current - parsed.timestamp) > tolerance_seconds:
        return VerificationOutcome.invalid(VerificationReason.EXPIRED_TIMESTAMP)

    expected = sign(parsed.timestamp, payload, secret)
    if not _signatures_match(expected, parsed.signature):
        return VerificationOutcome.invalid(VerificationReason.SIGNATURE_MISMATCH)

    return VerificationOutcome.ok(parsed.timestamp)


def create_signed_payload(
    event: dict[str, Any],
    secret: bytes | str,
    now: float | None = None,
) -> dict[str, Any]:
    """Stamp ``event`` with the current time and a signature over it.

    The event plus ``timestamp`` is serialized once with
    :func:`canonical_json` and signed; ``signature`` is attached afterwards
    and never part of its own signing input.
    """
    if not secret:
        raise ConfigurationError("Webhook secret is required")
    if "signature" in event:
        raise ConfigurationError("Event must not already carry a 'signature' field")

    timestamp = int(time.time() if now is None else now)
    stamped = {**event, "timestamp": timestamp}
    signature = sign(timestamp, canonical_json(stamped), secret)
    return {**stamped, "signature": signature}


def signed_request(
    event: dict[str, Any],
    secret: bytes | str,
    now: float | None = None,
) -> SignedWebhook:
    """Build the body bytes and signature header for delivering ``event``."""
    if not secret:
        raise ConfigurationError("Webhook secret is required")

    timestamp = int(time.time() if now is None else now)
    body = canonical_json(event)
    signature = sign(timestamp, body, secret)
    return SignedWebhook(
        body=body,
        timestamp=timestamp,
        signature=signature,
        headers={
            "Content-Type": "application/json",
            SIGNATURE_HEADER: format_header(timestamp, signature),
        },
    )


class WebhookVerifier:
    """Holds a read-only secret and tolerance for verifying incoming webhooks.

    Safe to share between concurrent requests: no state changes after
    construction.
    """

    def __init__(
        self,
        secret: bytes | str,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("Webhook secret is required")
        if tolerance_seconds < 0:
            raise ConfigurationError("tolerance_seconds must be non-negative")
        self._secret = secret
        self.tolerance_seconds = tolerance_seconds
        self._clock = clock

    def verify(self, payload: bytes | str, header_value: str) -> VerificationOutcome:
        outcome = verify(
            payload,
            header_value,
            self._secret,
            tolerance_seconds=self.tolerance_seconds,
            now=self._clock(),
        )
        if not outcome.valid:
            logger.warning("Webhook verification failed: %s", outcome.reason)
        return outcome

    def construct_event(self, payload: bytes | str, header_value: str) -> dict[str, Any]:
        """Verify the payload and decode it into an event dict.

        Raises:
            WebhookSignatureError: Verification failed; ``reason`` says why.
            WebhookPayloadError: The verified body is not a JSON object.
        """
        outcome = self.verify(payload, header_value)
        if not outcome.valid:
            raise WebhookSignatureError(outcome.reason)

        try:
            event = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise WebhookPayloadError(f"Webhook body is not valid JSON: {exc}") from exc
        if not isinstance(event, dict):
            raise WebhookPayloadError("Webhook body must be a JSON object")
        return event

    def verify_signed_payload(self, signed_event: dict[str, Any]) -> VerificationOutcome:
        """Verify a dict produced by :func:`create_signed_payload`.

        The signing input is rebuilt by removing ``signature`` and
        re-serializing with :func:`canonical_json`.
        """
        unsigned = dict(signed_event)
        signature = unsigned.pop("signature", None)
        timestamp = unsigned.get("timestamp")
        if not signature or not isinstance(timestamp, int) or isinstance(timestamp, bool):
            outcome = VerificationOutcome.invalid(VerificationReason.MISSING_PARAMETER)
            logger.warning("Webhook verification failed: %s", outcome.reason)
            return outcome
        if timestamp < 0:
            outcome = VerificationOutcome.invalid(VerificationReason.MALFORMED_HEADER)
            logger.warning("Webhook verification failed: %s", outcome.reason)
            return outcome
        return self.verify(canonical_json(unsigned), format_header(timestamp, str(signature)))
