"""Focused tests for relay_providers.base.logging.

Covers:
- _parse_level string parsing
- _coerce_tokens stability
- normalized_log_event emits the required keys
- get_logger re-roots foreign names under the shared ``relay`` logger
- the retry engine logs ``retry.attempt``
"""
from __future__ import annotations

import json
import logging

import pytest

from relay_providers.base.errors import APIError
from relay_providers.base.log_support import JsonFormatter, LogContext
from relay_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _coerce_tokens,  # type: ignore[attr-defined]
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from relay_providers.base.models import Usage
from relay_providers.base.resilience import RetryConfig, with_retry


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_get_logger_reroots_names():
    assert get_logger("relay_providers.openai.client").name == "relay.relay_providers.openai.client"  # nosec B101
    assert get_logger("relay.providers.x").name == "relay.providers.x"  # nosec B101
    assert get_logger().name == "relay"  # nosec B101


def test_normalized_log_event_emits_required_keys(relay_log):
    logger = get_logger("relay.test.logging")
    ctx = LogContext(provider="p", model="m", extra={"request": "r1"})
    normalized_log_event(
        logger,
        "stream.end",
        ctx,
        phase="finalize",
        error_code="E1002",
        emitted=True,
        tokens=Usage.of(10, 5),
        phase_extra="x",
        attempt_extra=None,
    )
    payload = relay_log.events()[-1]
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["event"] == "stream.end"  # nosec B101
    assert payload["provider"] == "p" and payload["model"] == "m"  # nosec B101
    assert payload["request"] == "r1"  # nosec B101
    assert payload["attempt"] is None  # nosec B101
    assert payload["tokens"] == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}  # nosec B101
    assert payload["phase_extra"] == "x"  # nosec B101
    assert "attempt_extra" not in payload  # nosec B101


def test_log_event_drops_none_unless_kept(relay_log):
    logger = get_logger("relay.test.logging")
    log_event(logger, "plain", a=None, b=1)
    log_event(logger, "kept", keep_none=True, a=None)
    first, second = relay_log.events()[-2:]
    assert first == {"event": "plain", "b": 1}  # nosec B101
    assert second == {"event": "kept", "a": None}  # nosec B101


def test_coerce_tokens_shapes():
    assert _coerce_tokens(None) is None  # nosec B101
    assert _coerce_tokens({"prompt": 1}) == {"prompt": 1}  # nosec B101
    assert _coerce_tokens([("prompt", 1), ("completion", 2)]) == {"prompt": 1, "completion": 2}  # nosec B101
    assert _coerce_tokens(7) == {"value": "7"}  # nosec B101


def test_json_formatter_flattens_structured_messages():
    record = logging.LogRecord("relay.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "k": 1}), None, None)
    data = json.loads(JsonFormatter().format(record))
    assert data["event"] == "e" and data["k"] == 1  # nosec B101
    assert data["level"] == "INFO" and data["logger"] == "relay.x"  # nosec B101
    assert "msg" not in data  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "relay.log"
    logger = configure_logger(level="DEBUG", file_path=str(path))
    try:
        assert logger.level == logging.DEBUG  # nosec B101
        log_event(get_logger("relay.test.file"), "to.file", k="v")
        for h in logger.handlers:
            h.flush()
        assert '"event": "to.file"' in path.read_text(encoding="utf-8")  # nosec B101
    finally:
        configure_logger(level=logging.INFO, file_path=None)
    assert not any(hasattr(h, "baseFilename") for h in logger.handlers)  # nosec B101


def test_retry_attempts_are_logged(relay_log, no_sleep):
    calls = []

    def op():
        calls.append(1)
        if len(calls) < 2:
            raise APIError.from_http_status(503, "x")
        return "ok"

    assert with_retry(op, RetryConfig(jitter=False)) == "ok"  # nosec B101
    attempts = [e for e in relay_log.events() if e.get("event") == "retry.attempt"]
    assert len(attempts) == 1  # nosec B101
    assert attempts[0]["phase"] == "retry"  # nosec B101
    assert attempts[0]["attempt"] == 1  # nosec B101
    assert attempts[0]["error_code"] == "E2006"  # nosec B101
    assert attempts[0]["delay_ms"] == pytest.approx(1000.0)  # nosec B101
