from __future__ import annotations

import json

from relay_providers.base.errors import extract_sse_error_message, map_error_type_to_message


def test_nested_error_object_in_data():
    payload = {"data": json.dumps({"error": {"message": "model overloaded", "type": "overloaded_error"}})}
    assert extract_sse_error_message(payload) == "model overloaded"  # nosec B101


def test_google_style_status_string():
    payload = {"data": json.dumps({"error": {"status": "UNAVAILABLE"}})}
    assert extract_sse_error_message(payload) == "UNAVAILABLE"  # nosec B101


def test_plain_sentence_is_kept():
    assert extract_sse_error_message({"data": "Upstream closed"}) == "Upstream closed"  # nosec B101


def test_markup_and_long_text_fall_back_to_default():
    assert extract_sse_error_message({"data": "<html>502</html>"}, "fallback") == "fallback"  # nosec B101
    assert extract_sse_error_message({"data": "x" * 201}, "fallback") == "fallback"  # nosec B101
    assert extract_sse_error_message({"message": "y" * 201}, "fallback") == "fallback"  # nosec B101
    assert extract_sse_error_message({"message": "<html>oops</html>"}, "fallback") == "fallback"  # nosec B101


def test_message_and_error_fields():
    assert extract_sse_error_message({"message": "boom"}) == "boom"  # nosec B101
    assert extract_sse_error_message({"message": {"error": {"message": "inner"}}}) == "inner"  # nosec B101
    assert extract_sse_error_message({"error": "bad thing"}) == "bad thing"  # nosec B101


def test_non_mapping_returns_default():
    assert extract_sse_error_message(None) == "Connection failed"  # nosec B101
    assert extract_sse_error_message("text", "x") == "x"  # nosec B101


def test_status_enhancement():
    assert (  # nosec B101
        extract_sse_error_message({"message": "nope", "status": 401}) == "Invalid API key or unauthorized access"
    )
    assert (  # nosec B101
        extract_sse_error_message({"message": "slow down", "status": 429})
        == "Rate limit exceeded. Please try again later"
    )
    assert (  # nosec B101
        extract_sse_error_message({"message": "oops", "status": 502})
        == "The AI service is temporarily unavailable. Please try again"
    )
    # Vendor text that already explains the status is kept.
    assert extract_sse_error_message({"message": "Service unavailable", "status": 503}) == "Service unavailable"  # nosec B101
    assert extract_sse_error_message({"message": "bad api key", "status": 401}) == "bad api key"  # nosec B101


def test_error_type_map():
    assert map_error_type_to_message("overloaded_error").startswith("The AI service is temporarily overloaded")  # nosec B101
    assert map_error_type_to_message("rate_limit_error").startswith("Rate limit exceeded")  # nosec B101
    assert map_error_type_to_message("nonexistent") is None  # nosec B101
