from __future__ import annotations

from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.models import Citation, MessageAttachment
from relay_providers.base.streaming import Citations, Done, TextDelta
from relay_providers.perplexity import PerplexityAdapter
from relay_providers.perplexity.client import citations_from_response
from relay_providers.tests.helpers import Recorder, json_response, mock_client

_RESPONSE = {
    "model": "sonar",
    "choices": [{"message": {"content": "Paris is the capital [1][2]."}}],
    "citations": ["https://www.example.com/paris", "https://wiki.test/France"],
    "search_results": [{"url": "https://www.example.com/paris", "title": "Paris", "snippet": "Capital city"}],
    "usage": {"prompt_tokens": 5, "completion_tokens": 7},
}


def _adapter(recorder, **params):
    params.setdefault("api_key", "pplx-key")
    return PerplexityAdapter(client=mock_client(recorder), **params)


def test_payload_requests_citations_and_uses_defaults():
    recorder = Recorder(json_response(_RESPONSE))
    _adapter(recorder).send_message("Capital of France?", [])
    body = recorder.last_json()
    assert str(recorder.last.url) == "https://api.perplexity.ai/chat/completions"  # nosec B101
    assert recorder.last.headers["accept"] == "application/json"  # nosec B101
    assert body["stream"] is False  # nosec B101
    assert body["return_citations"] is True  # nosec B101
    assert body["search_recency_filter"] == "month"  # nosec B101
    assert body["temperature"] == 0.7  # nosec B101
    assert body["max_tokens"] == 2048  # nosec B101
    assert body["model"] == "sonar"  # nosec B101


def test_attachments_images_then_documents_then_text():
    recorder = Recorder(json_response(_RESPONSE))
    attachments = [
        MessageAttachment(type="document", uri="a.pdf", mime_type="application/pdf", base64="XYZ", file_name="a.pdf"),
        MessageAttachment(type="image", uri="p.jpg", mime_type="image/jpeg", base64="IMG"),
    ]
    _adapter(recorder).send_message("Summarize", [], attachments=attachments)
    content = recorder.last_json()["messages"][-1]["content"]
    assert content == [  # nosec B101
        {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,IMG"}},
        {"type": "file_url", "file_url": {"url": "XYZ"}, "file_name": "a.pdf"},
        {"type": "text", "text": "Summarize"},
    ]


def test_send_returns_raw_content_with_citations_metadata():
    result = _adapter(Recorder(json_response(_RESPONSE))).send_message("Q", [])
    assert result.response == "Paris is the capital [1][2]."  # nosec B101
    assert result.citations == [  # nosec B101
        Citation(index=1, url="https://www.example.com/paris", title="Paris", snippet="Capital city", domain="example.com"),
        Citation(index=2, url="https://wiki.test/France", domain="wiki.test"),
    ]
    assert result.metadata["citations"][1] == {"index": 2, "url": "https://wiki.test/France", "domain": "wiki.test"}  # nosec B101
    assert result.usage.total_tokens == 12  # nosec B101


def test_search_results_used_when_citations_missing():
    data = {"search_results": [{"url": "https://b.test/x", "title": "B"}, {"title": "no url"}]}
    assert citations_from_response(data) == [Citation(index=1, url="https://b.test/x", title="B", domain="b.test")]  # nosec B101
    assert citations_from_response({}) == []  # nosec B101


def test_stream_is_simulated_from_blocking_call(no_sleep):
    recorder = Recorder(json_response(_RESPONSE))
    events = list(_adapter(recorder).stream_events("Q", []))
    assert recorder.last_json()["stream"] is False  # nosec B101
    deltas = [e for e in events if isinstance(e, TextDelta)]
    assert [d.text for d in deltas] == ["Paris is", " the cap", "ital [1]", "[2]."]  # nosec B101
    assert isinstance(events[-2], Citations)  # nosec B101
    assert len(events[-2].citations) == 2  # nosec B101
    assert events[-1] == Done()  # nosec B101
    assert no_sleep == [0.012, 0.012, 0.012]  # nosec B101


def test_stream_message_delivers_citations_through_on_event(no_sleep):
    seen = []
    chunks = list(_adapter(Recorder(json_response(_RESPONSE))).stream_message("Q", [], on_event=seen.append))
    assert "".join(chunks) == "Paris is the capital [1][2]."  # nosec B101
    assert seen == [{"type": "citations", "citations": [c.to_dict() for c in citations_from_response(_RESPONSE)]}]  # nosec B101


def test_cancelled_before_start_makes_no_request():
    recorder = Recorder(json_response(_RESPONSE))
    token = CancellationToken()
    token.cancel()
    events = list(_adapter(recorder).stream_events("Q", [], cancel_token=token))
    assert events == [Done(cancelled=True)]  # nosec B101
    assert recorder.requests == []  # nosec B101
