"""HMAC-SHA256 webhook signatures and the ``t=...,v1=...`` header format.

The signed string is the ASCII decimal timestamp, a literal ``.``, then the
payload bytes exactly as they travel on the wire. Receivers in any language
reproduce the same digest from the raw request body, so the payload must
never be re-serialized between signing and sending.
"""

import hashlib
import hmac
from dataclasses import dataclass

SIGNATURE_HEADER = "X-Webhook-Signature"
SCHEME = "v1"
TIMESTAMP_KEY = "t"

# Timestamps must fit a signed 64-bit integer
MAX_TIMESTAMP = 2**63 - 1
MAX_TIMESTAMP_DIGITS = len(str(MAX_TIMESTAMP))


class SignatureHeaderError(ValueError):
    """The signature header could not be parsed."""


@dataclass(frozen=True)
class ParsedSignatureHeader:
    timestamp: int
    signature: str


def _to_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


def sign(timestamp: int, payload: bytes | str, secret: bytes | str) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``"<timestamp>.<payload>"``."""
    if timestamp < 0:
        raise ValueError("timestamp must be non-negative")
    message = str(timestamp).encode("ascii") + b"." + _to_bytes(payload)
    return hmac.new(_to_bytes(secret), message, hashlib.sha256).hexdigest()


def format_header(timestamp: int, signature: str) -> str:
    return f"{TIMESTAMP_KEY}={timestamp},{SCHEME}={signature}"


def parse_header(header: str) -> ParsedSignatureHeader:
    """Parse a ``t=<timestamp>,v1=<signature>`` header value.

    Unknown ``key=value`` segments (future ``v2=`` schemes and the like) are
    skipped. The first occurrence of a repeated key wins.

    Raises:
        SignatureHeaderError: ``t`` or ``v1`` is absent, or ``t`` is not an
            unsigned decimal integer that fits in 64 bits.
    """
    values: dict[str, str] = {}
    for segment in header.split(","):
        key, sep, value = segment.strip().partition("=")
        if not sep:
            continue
        values.setdefault(key.strip(), value.strip())

    raw_timestamp = values.get(TIMESTAMP_KEY)
    signature = values.get(SCHEME)
    if not raw_timestamp:
        raise SignatureHeaderError(f"missing '{TIMESTAMP_KEY}' in signature header")
    if not signature:
        raise SignatureHeaderError(f"missing '{SCHEME}' in signature header")
    if len(raw_timestamp) > MAX_TIMESTAMP_DIGITS:
        raise SignatureHeaderError("timestamp is too long")
    # str.isdigit() also accepts non-ASCII digits such as superscripts
    if not (raw_timestamp.isascii() and raw_timestamp.isdigit()):
        raise SignatureHeaderError(f"invalid timestamp {raw_timestamp!r}")
    timestamp = int(raw_timestamp)
    if timestamp > MAX_TIMESTAMP:
        raise SignatureHeaderError("timestamp is out of range")

    return ParsedSignatureHeader(timestamp=timestamp, signature=signature)
