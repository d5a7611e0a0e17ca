from __future__ import annotations

from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.models import Citation
from relay_providers.base.streaming import Citations, Done, TextDelta, accumulate_text, chunk_text, simulate_stream


def test_chunk_text_uses_eight_character_pieces():
    assert chunk_text("abcdefghij") == ["abcdefgh", "ij"]  # nosec B101
    assert chunk_text("") == []  # nosec B101


def test_simulated_stream_paces_chunks_then_citations_then_done(no_sleep):
    citation = Citation(index=1, url="https://example.com")
    events = list(simulate_stream("Hello simulated world", citations=[citation]))
    assert accumulate_text(events) == "Hello simulated world"  # nosec B101
    assert events[-2] == Citations((citation,))  # nosec B101
    assert events[-1] == Done()  # nosec B101
    # One pause between consecutive chunks, none after the last one.
    assert no_sleep == [0.012, 0.012]  # nosec B101


def test_simulated_stream_stops_on_cancel():
    token = CancellationToken()
    stream = simulate_stream("0123456789abcdefghij", cancel_token=token, delay_seconds=5)
    assert next(stream) == TextDelta("01234567")  # nosec B101
    token.cancel()
    assert list(stream) == [Done(cancelled=True)]  # nosec B101


def test_empty_text_completes_immediately():
    assert list(simulate_stream("")) == [Done()]  # nosec B101
