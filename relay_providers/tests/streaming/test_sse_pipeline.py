"""run_sse_stream wiring: translator dispatch, failures and cancellation."""
from __future__ import annotations

import threading

import httpx

from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.errors import APIError, ErrorCode, NetworkError
from relay_providers.base.streaming import Done, StreamError, TextDelta, run_sse_stream
from relay_providers.tests.helpers import mock_client, sse_body


def _echo_translator(event_name, data):
    if data == "[END]":
        return [Done()]
    return [TextDelta(f"{event_name}:{data}")]


def test_frames_flow_through_translator_until_terminal():
    body = sse_body(["a", ("custom", "b"), "[END]", "ignored"])
    client = mock_client(lambda request: httpx.Response(200, content=body))
    events = list(run_sse_stream(client, "https://x.test/stream", provider="p", translator=_echo_translator))
    assert events == [TextDelta("message:a"), TextDelta("custom:b"), Done()]  # nosec B101


def test_body_end_without_terminal_completes():
    client = mock_client(lambda request: httpx.Response(200, content=sse_body(["a"])))
    events = list(run_sse_stream(client, "https://x.test/stream", provider="p", translator=_echo_translator))
    assert events == [TextDelta("message:a"), Done()]  # nosec B101


def test_http_error_becomes_single_stream_error():
    client = mock_client(
        lambda request: httpx.Response(429, json={"error": {"message": "Rate limit reached", "type": "rate_limit_error"}})
    )
    events = list(run_sse_stream(client, "https://x.test/stream", provider="p", translator=_echo_translator))
    assert len(events) == 1  # nosec B101
    err = events[0]
    assert isinstance(err, StreamError)  # nosec B101
    assert err.status == 429 and err.retryable  # nosec B101
    assert isinstance(err.error, APIError) and err.error.code is ErrorCode.API_RATE_LIMITED  # nosec B101
    assert err.message == "Rate limit reached"  # nosec B101


def test_transport_failure_is_normalized():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    events = list(run_sse_stream(mock_client(handler), "https://x.test/s", provider="p", translator=_echo_translator))
    assert len(events) == 1  # nosec B101
    assert isinstance(events[0].error, NetworkError)  # nosec B101
    assert events[0].error.code is ErrorCode.NETWORK_CONNECTION_REFUSED  # nosec B101


def test_cancel_mid_stream_ends_without_error():
    release = threading.Event()

    def body():
        yield sse_body(["first"])
        release.wait(5)
        yield sse_body(["second"])

    client = mock_client(lambda request: httpx.Response(200, content=body()))
    token = CancellationToken()
    stream = run_sse_stream(client, "https://x.test/s", provider="p", translator=_echo_translator, cancel_token=token)
    try:
        assert next(stream) == TextDelta("message:first")  # nosec B101
        token.cancel()
        rest = list(stream)
    finally:
        release.set()
    assert rest == [Done(cancelled=True)]  # nosec B101


def test_pre_cancelled_token_never_connects():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=sse_body(["a"]))

    token = CancellationToken()
    token.cancel()
    events = list(run_sse_stream(mock_client(handler), "https://x.test/s", provider="p", translator=_echo_translator, cancel_token=token))
    assert events == [Done(cancelled=True)]  # nosec B101
    assert calls == []  # nosec B101
