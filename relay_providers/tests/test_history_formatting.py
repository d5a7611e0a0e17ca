from __future__ import annotations

from relay_providers.base.history import (
    ResumptionContext,
    continuation_note,
    enforce_alternation,
    ensure_user_first,
    format_history,
    merge_consecutive_roles,
    merge_content,
)
from relay_providers.tests.helpers import message


def test_only_last_ten_messages_are_sent():
    history = [message(i, f"message-{i}", sender_type="user" if i % 2 == 0 else "ai") for i in range(12)]
    turns = format_history(history, provider_id="openai")
    assert len(turns) == 10  # nosec B101
    assert turns[0] == {"role": "user", "content": "message-2"}  # nosec B101
    assert turns[1] == {"role": "assistant", "content": "message-3"}  # nosec B101


def test_history_is_ordered_by_timestamp():
    history = [message(2, "second"), message(1, "first", sender_type="ai")]
    turns = format_history(history)
    assert [t["content"] for t in turns] == ["first", "second"]  # nosec B101


def test_resumption_note_is_prepended_and_truncated():
    original = message(0, "x" * 150)
    turns = format_history([message(1, "hi")], resumption=ResumptionContext(original_prompt=original))
    assert len(turns) == 2  # nosec B101
    assert turns[0]["role"] == "user"  # nosec B101
    assert turns[0]["content"].startswith('[Continuation note] Previously started with: "' + "x" * 100 + '..."')  # nosec B101
    assert continuation_note(ResumptionContext(original_prompt=original, is_resuming=False)) is None  # nosec B101
    assert continuation_note(None) is None  # nosec B101


def test_debate_mode_attributes_other_participants():
    history = [
        message(0, "Is tea better than coffee?"),
        message(1, "Tea, clearly.", sender_type="ai", sender="Claude", provider_id="anthropic"),
        message(2, "Coffee wins.", sender_type="ai", sender="ChatGPT", provider_id="openai"),
    ]
    turns = format_history(history, provider_id="openai", debate_mode=True)
    assert turns == [  # nosec B101
        {"role": "user", "content": "Is tea better than coffee?\n\n[Claude] Tea, clearly."},
        {"role": "assistant", "content": "Coffee wins."},
    ]


def test_without_debate_mode_every_ai_message_is_assistant():
    history = [message(0, "a", sender_type="ai", sender="Claude", provider_id="anthropic")]
    assert format_history(history, provider_id="openai") == [{"role": "assistant", "content": "a"}]  # nosec B101


def test_merge_content_for_text_and_parts():
    assert merge_content("a", "b") == "a\n\nb"  # nosec B101
    parts = merge_content("a", [{"type": "image_url", "image_url": {"url": "u"}}])
    assert parts == [{"type": "text", "text": "a"}, {"type": "image_url", "image_url": {"url": "u"}}]  # nosec B101


def test_merge_consecutive_roles_keeps_alternation():
    turns = [
        {"role": "user", "content": "one"},
        {"role": "user", "content": "two"},
        {"role": "assistant", "content": "three"},
        {"role": "assistant", "content": "four"},
    ]
    assert merge_consecutive_roles(turns) == [  # nosec B101
        {"role": "user", "content": "one\n\ntwo"},
        {"role": "assistant", "content": "three\n\nfour"},
    ]


def test_leading_assistant_turn_is_rewritten_after_system():
    turns = [
        {"role": "system", "content": "sys"},
        {"role": "assistant", "content": "earlier answer"},
        {"role": "user", "content": "question"},
    ]
    out = ensure_user_first(turns)
    assert out[1] == {"role": "user", "content": "[Previous assistant] earlier answer"}  # nosec B101
    assert turns[1]["role"] == "assistant"  # nosec B101


def test_enforce_alternation_merges_before_rewriting():
    turns = [
        {"role": "assistant", "content": "a1"},
        {"role": "assistant", "content": "a2"},
        {"role": "user", "content": "u1"},
    ]
    assert enforce_alternation(turns) == [  # nosec B101
        {"role": "user", "content": "[Previous assistant] a1\n\na2"},
        {"role": "user", "content": "u1"},
    ]
