"""Tests for the stablecoin-webhook CLI."""

import time

import pytest

from stablecoin_gateway.cli import main
from stablecoin_gateway.webhooks.signing import format_header, sign


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch):
    """Leave pytest's log capture handlers on the root logger."""
    monkeypatch.setattr("stablecoin_gateway.cli.configure_logging", lambda **kwargs: None)


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_bytes(b'{"id":"evt_1"}')
    return path


def test_sign_prints_header(payload_file, capsys):
    exit_code = main(["--secret", "whsec_abc", "sign", str(payload_file), "--timestamp", "1700000000"])
    out = capsys.readouterr().out.strip()
    assert exit_code == 0
    expected = format_header(1700000000, sign(1700000000, b'{"id":"evt_1"}', "whsec_abc"))
    assert out == f"X-Webhook-Signature: {expected}"


def test_verify_accepts_fresh_signature(payload_file, capsys):
    timestamp = int(time.time())
    header = format_header(timestamp, sign(timestamp, b'{"id":"evt_1"}', "whsec_abc"))
    exit_code = main(["--secret", "whsec_abc", "verify", str(payload_file), "--header", header])
    assert exit_code == 0
    assert "valid" in capsys.readouterr().out


def test_verify_reports_reason(payload_file, capsys):
    header = format_header(1700000000, sign(1700000000, b'{"id":"evt_1"}', "whsec_abc"))
    exit_code = main(["--secret", "whsec_abc", "verify", str(payload_file), "--header", header])
    assert exit_code == 1
    assert "expired_timestamp" in capsys.readouterr().err


def test_requires_secret(payload_file, monkeypatch):
    monkeypatch.setattr("stablecoin_gateway.cli.get_settings", lambda: type("S", (), {"webhook_secret": ""})())
    with pytest.raises(SystemExit):
        main(["sign", str(payload_file)])
