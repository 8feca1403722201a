"""Exception taxonomy for the Stablecoin Gateway SDK.

Every error carries a stable ``code`` so callers can branch on the kind of
failure without matching on message text.
"""

from typing import Any

from stablecoin_gateway.models.enums import VerificationReason


class GatewayError(Exception):
    """Base exception for the SDK."""

    def __init__(self, code: str, message: str, details: Any = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class ConfigurationError(GatewayError):
    """Invalid or missing arguments supplied by the caller. Never retried."""

    def __init__(self, message: str):
        super().__init__("CONFIGURATION_ERROR", message)


class RequestTimeoutError(GatewayError):
    """A single attempt exceeded its deadline."""

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__("TIMEOUT", f"Request timed out after {timeout_ms}ms")


class NetworkError(GatewayError):
    """The transport failed before any HTTP response was received."""

    def __init__(self, message: str):
        super().__init__("NETWORK_ERROR", message)


class ApiError(GatewayError):
    """The gateway answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str = "UNKNOWN_ERROR",
        details: Any = None,
    ):
        self.status_code = status_code
        super().__init__(code, message, details)

    def is_validation_error(self) -> bool:
        return self.status_code == 400

    def is_authentication_error(self) -> bool:
        return self.status_code == 401

    def is_permission_error(self) -> bool:
        return self.status_code == 403

    def is_not_found_error(self) -> bool:
        return self.status_code == 404

    def is_rate_limit_error(self) -> bool:
        return self.status_code == 429

    def is_server_error(self) -> bool:
        return 500 <= self.status_code <= 599

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, code={self.code!r}, message={self.message!r})"


class WebhookSignatureError(GatewayError):
    """Webhook verification failed for a specific reason."""

    _MESSAGES = {
        VerificationReason.MISSING_PARAMETER: "Missing payload, signature header or secret",
        VerificationReason.MALFORMED_HEADER: "Signature header is malformed",
        VerificationReason.EXPIRED_TIMESTAMP: "Webhook timestamp is outside the tolerance window",
        VerificationReason.SIGNATURE_MISMATCH: "Webhook signature does not match the payload",
    }

    def __init__(self, reason: VerificationReason):
        self.reason = reason
        super().__init__(
            f"WEBHOOK_SIGNATURE_{reason.name}",
            self._MESSAGES[reason],
            {"reason": reason.value},
        )


class WebhookPayloadError(GatewayError):
    """A verified webhook body could not be decoded into an event object."""

    def __init__(self, message: str):
        super().__init__("WEBHOOK_PAYLOAD_ERROR", message)
