from __future__ import annotations

import json

import pytest

from relay_providers.base.errors import APIError, ErrorCode
from relay_providers.base.models import Citation, MessageAttachment
from relay_providers.base.streaming import Citations, Done, StreamError, TextDelta
from relay_providers.gemini import GeminiAdapter
from relay_providers.gemini.client import GeminiStreamTranslator, grounding_citations
from relay_providers.tests.helpers import Recorder, json_response, message, mock_client, sse_response


def _candidate(text, **extra):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, **extra}]}


_RESPONSE = {
    **_candidate(
        "Grounded answer",
        groundingMetadata={
            "groundingChunks": [
                {"web": {"uri": "https://vertexaisearch.test/redirect/1", "title": "example.com"}},
                {"web": {"uri": "https://vertexaisearch.test/redirect/2"}},
                {"retrievedContext": {}},
            ]
        },
    ),
    "usageMetadata": {"promptTokenCount": 4, "candidatesTokenCount": 2, "totalTokenCount": 6},
}


def _adapter(recorder, **params):
    params.setdefault("api_key", "g-key")
    return GeminiAdapter(client=mock_client(recorder), **params)


def test_request_shape():
    recorder = Recorder(json_response(_RESPONSE))
    history = [message(1, "Q1"), message(2, "A1", sender_type="ai", sender="Gemini", provider_id="gemini")]
    adapter = _adapter(recorder, temperature=0.5, top_p=0.8, max_tokens=300, extra={"top_k": 40})
    adapter.send_message("Q2", history)
    request = recorder.last
    body = recorder.last_json()
    assert str(request.url) == (  # nosec B101
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
    )
    assert request.headers["x-goog-api-key"] == "g-key"  # nosec B101
    assert body["contents"] == [  # nosec B101
        {"role": "user", "parts": [{"text": "Q1"}]},
        {"role": "model", "parts": [{"text": "A1"}]},
        {"role": "user", "parts": [{"text": "Q2"}]},
    ]
    assert body["systemInstruction"] == {"parts": [{"text": "You are a helpful AI assistant."}]}  # nosec B101
    assert body["generationConfig"] == {"temperature": 0.5, "topP": 0.8, "topK": 40, "maxOutputTokens": 300}  # nosec B101
    assert "tools" not in body  # nosec B101


def test_attachments_appended_to_last_user_content():
    recorder = Recorder(json_response(_RESPONSE))
    attachments = [MessageAttachment(type="image", uri="x.png", mime_type="image/png", base64="PNG")]
    _adapter(recorder).send_message("What is this?", [], attachments=attachments)
    assert recorder.last_json()["contents"][-1]["parts"] == [  # nosec B101
        {"text": "What is this?"},
        {"inline_data": {"mime_type": "image/png", "data": "PNG"}},
    ]


def test_grounding_citations_use_title_as_domain():
    result = _adapter(Recorder(json_response(_RESPONSE)), web_search=True).send_message("Q", [])
    assert result.response == "Grounded answer"  # nosec B101
    assert result.citations == [  # nosec B101
        Citation(index=1, url="https://vertexaisearch.test/redirect/1", title="example.com", domain="example.com"),
        Citation(index=2, url="https://vertexaisearch.test/redirect/2", domain="Source 2"),
    ]
    assert result.usage.total_tokens == 6  # nosec B101
    assert grounding_citations({}) == []  # nosec B101


def test_web_search_enables_google_search_tool():
    recorder = Recorder(json_response(_RESPONSE))
    _adapter(recorder, web_search=True).send_message("Q", [])
    assert recorder.last_json()["tools"] == [{"google_search": {}}]  # nosec B101


def test_http_error_uses_gemini_label():
    body = {"error": {"code": 503, "message": "Unavailable", "status": "UNAVAILABLE"}}
    with pytest.raises(APIError) as excinfo:
        _adapter(Recorder(json_response(body, status=503))).send_message("Hi", [])
    assert excinfo.value.message == "Gemini error (503): Unavailable"  # nosec B101
    assert excinfo.value.code is ErrorCode.API_SERVICE_UNAVAILABLE  # nosec B101


def test_blocked_prompt_is_content_filtered():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    with pytest.raises(APIError) as excinfo:
        _adapter(Recorder(json_response(body))).send_message("Hi", [])
    assert excinfo.value.code is ErrorCode.API_CONTENT_FILTERED  # nosec B101
    assert excinfo.value.retryable is False  # nosec B101


def test_sse_stream_uses_alt_sse_and_finishes_on_finish_reason():
    frames = [
        _candidate("Hel"),
        _candidate("lo"),
        {**_candidate("!", finishReason="STOP"), "usageMetadata": {"totalTokenCount": 9}},
    ]
    recorder = Recorder(sse_response(frames))
    seen = []
    events = list(_adapter(recorder).stream_events("Hi", [], on_event=seen.append))
    assert recorder.last.url.path.endswith("/models/gemini-2.5-flash:streamGenerateContent")  # nosec B101
    assert recorder.last.url.params["alt"] == "sse"  # nosec B101
    assert events == [TextDelta("Hel"), TextDelta("lo"), TextDelta("!"), Done()]  # nosec B101
    assert seen == [{"type": "usage", "usage": {"totalTokenCount": 9}}]  # nosec B101


def test_web_search_stream_is_simulated_with_citations(no_sleep):
    recorder = Recorder(json_response(_RESPONSE))
    events = list(_adapter(recorder, web_search=True).stream_events("Q", []))
    assert str(recorder.last.url).endswith(":generateContent")  # nosec B101
    assert "".join(e.text for e in events if isinstance(e, TextDelta)) == "Grounded answer"  # nosec B101
    assert isinstance(events[-2], Citations)  # nosec B101
    assert events[-1] == Done()  # nosec B101


def test_translator_block_reason_and_error_frames():
    translator = GeminiStreamTranslator()
    blocked = translator("message", json.dumps({"promptFeedback": {"blockReason": "SAFETY"}}))
    assert isinstance(blocked[-1], StreamError)  # nosec B101
    assert blocked[-1].error.code is ErrorCode.API_CONTENT_FILTERED  # nosec B101
    assert blocked[-1].retryable is False  # nosec B101

    failed = translator("message", json.dumps({"error": {"code": 500, "message": "Internal"}}))
    assert failed == [StreamError(message="Internal", retryable=True)]  # nosec B101
    assert translator("message", "not json") == []  # nosec B101
