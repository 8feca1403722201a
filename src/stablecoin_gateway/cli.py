"""CLI for signing and verifying webhook payloads while integrating a receiver."""

import argparse
import sys
import time
from pathlib import Path

from stablecoin_gateway.config import get_settings
from stablecoin_gateway.logging_config import configure_logging
from stablecoin_gateway.webhooks.signing import SIGNATURE_HEADER, format_header, sign
from stablecoin_gateway.webhooks.verifier import DEFAULT_TOLERANCE_SECONDS, WebhookVerifier


def _read_payload(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _resolve_secret(args: argparse.Namespace) -> str:
    secret = args.secret or get_settings().webhook_secret
    if not secret:
        raise SystemExit("error: a webhook secret is required (--secret or STABLECOIN_WEBHOOK_SECRET)")
    return secret


def _cmd_sign(args: argparse.Namespace) -> int:
    payload = _read_payload(args.payload)
    timestamp = args.timestamp if args.timestamp is not None else int(time.time())
    signature = sign(timestamp, payload, _resolve_secret(args))
    print(f"{SIGNATURE_HEADER}: {format_header(timestamp, signature)}")
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    payload = _read_payload(args.payload)
    verifier = WebhookVerifier(_resolve_secret(args), tolerance_seconds=args.tolerance)
    outcome = verifier.verify(payload, args.header)
    if outcome.valid:
        print(f"valid (t={outcome.timestamp})")
        return 0
    print(f"invalid: {outcome.reason}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="stablecoin-webhook",
        description="Sign and verify Stablecoin Gateway webhook payloads",
    )
    parser.add_argument("--secret", help="Webhook secret (default: STABLECOIN_WEBHOOK_SECRET)")
    parser.add_argument("--log-level", default="warning", help="Logging level (default: warning)")
    sub = parser.add_subparsers(dest="command", required=True)

    sign_parser = sub.add_parser("sign", help="Print the signature header for a payload")
    sign_parser.add_argument("payload", help="Path to the exact payload bytes, or - for stdin")
    sign_parser.add_argument("--timestamp", type=int, help="Epoch seconds (default: now)")
    sign_parser.set_defaults(func=_cmd_sign)

    verify_parser = sub.add_parser("verify", help="Verify a payload against a signature header")
    verify_parser.add_argument("payload", help="Path to the exact payload bytes, or - for stdin")
    verify_parser.add_argument("--header", required=True, help="Signature header value (t=...,v1=...)")
    verify_parser.add_argument(
        "--tolerance",
        type=int,
        default=DEFAULT_TOLERANCE_SECONDS,
        help=f"Freshness window in seconds (default: {DEFAULT_TOLERANCE_SECONDS})",
    )
    verify_parser.set_defaults(func=_cmd_verify)

    args = parser.parse_args(argv)
    configure_logging(log_level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
