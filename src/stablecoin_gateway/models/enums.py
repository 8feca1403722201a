"""String enums shared by the webhook and payments surfaces."""

from enum import StrEnum


class VerificationReason(StrEnum):
    MISSING_PARAMETER = "missing_parameter"
    MALFORMED_HEADER = "malformed_header"
    EXPIRED_TIMESTAMP = "expired_timestamp"
    SIGNATURE_MISMATCH = "signature_mismatch"


class RetryState(StrEnum):
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


class PaymentStatus(StrEnum):
    PENDING = "PENDING"
    CONFIRMING = "CONFIRMING"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


class RefundStatus(StrEnum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Network(StrEnum):
    POLYGON = "polygon"
    ETHEREUM = "ethereum"


class Token(StrEnum):
    USDC = "USDC"
    USDT = "USDT"
