"""Conversation history formatting shared by all adapters.

Turns the caller's :class:`Message` list into vendor-neutral chat turns
(``{"role": ..., "content": ...}``) and enforces the role constraints most
chat APIs impose:

* only the last :data:`HISTORY_LIMIT` messages are sent;
* a resumed conversation gets a short continuation note as its first turn;
* in multi-party (debate) mode, messages written by *other* AI participants
  are sent as user turns prefixed with the sender name, since from the
  called model's point of view they are input, not its own output;
* vendors requiring strict user/assistant alternation get consecutive
  same-role turns merged (text joined with a blank line; structured content
  concatenated part by part) and a leading assistant turn rewritten as a
  user turn.

Content is either a string or a list of vendor content parts (dicts); the
merge helpers treat a string as a single ``{"type": "text"}`` part.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import Message

ChatTurn = Dict[str, Any]

HISTORY_LIMIT = 10
DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."
MERGE_SEPARATOR = "\n\n"
_NOTE_SNIPPET_LENGTH = 100


@dataclass(frozen=True)
class ResumptionContext:
    """Marks a call that continues an interrupted conversation."""

    original_prompt: Optional[Message] = None
    is_resuming: bool = True


def continuation_note(resumption: Optional[ResumptionContext]) -> Optional[str]:
    """Return the short note injected ahead of a resumed history."""
    if resumption is None or not resumption.is_resuming or resumption.original_prompt is None:
        return None
    text = resumption.original_prompt.content.strip()
    if len(text) > _NOTE_SNIPPET_LENGTH:
        text = text[:_NOTE_SNIPPET_LENGTH].rstrip() + "..."
    return f'[Continuation note] Previously started with: "{text}". Continue from here.'


def format_history(
    history: Iterable[Message],
    *,
    provider_id: Optional[str] = None,
    debate_mode: bool = False,
    resumption: Optional[ResumptionContext] = None,
    limit: int = HISTORY_LIMIT,
) -> List[ChatTurn]:
    """Map caller messages to chat turns in timestamp order.

    Parameters:
        history: Conversation so far (not including the new message).
        provider_id: Key of the adapter being called; in debate mode only AI
            messages with this ``provider_id`` stay assistant turns.
        debate_mode: Enable multi-party attribution and same-role merging.
        resumption: Optional continuation context.
        limit: Number of most recent messages kept.
    """
    ordered = sorted(history, key=lambda m: m.timestamp)
    recent = ordered[-limit:] if limit > 0 else []
    turns: List[ChatTurn] = []
    note = continuation_note(resumption)
    if note:
        turns.append({"role": "user", "content": note})
    for msg in recent:
        if msg.is_user:
            turns.append({"role": "user", "content": msg.content})
        elif debate_mode and msg.provider_id != provider_id:
            turns.append({"role": "user", "content": f"[{msg.sender}] {msg.content}"})
        else:
            turns.append({"role": "assistant", "content": msg.content})
    return merge_consecutive_roles(turns) if debate_mode else turns


def _as_parts(content: Any) -> List[Any]:
    if isinstance(content, list):
        return list(content)
    return [{"type": "text", "text": content}]


def merge_content(first: Any, second: Any) -> Any:
    """Merge two turn contents (blank-line join for text, concatenation for parts)."""
    if isinstance(first, str) and isinstance(second, str):
        return f"{first}{MERGE_SEPARATOR}{second}"
    return _as_parts(first) + _as_parts(second)


def merge_consecutive_roles(turns: Sequence[ChatTurn]) -> List[ChatTurn]:
    """Collapse runs of same-role turns into one turn at the run's last position."""
    merged: List[ChatTurn] = []
    for turn in turns:
        if merged and merged[-1]["role"] == turn["role"]:
            prev = merged.pop()
            merged.append({**turn, "content": merge_content(prev["content"], turn["content"])})
        else:
            merged.append(dict(turn))
    return merged


def ensure_user_first(turns: Sequence[ChatTurn]) -> List[ChatTurn]:
    """Rewrite a leading assistant turn (after system turns) as a user turn."""
    out = [dict(t) for t in turns]
    for turn in out:
        if turn["role"] == "system":
            continue
        if turn["role"] == "assistant" and isinstance(turn["content"], str):
            turn["role"] = "user"
            turn["content"] = f"[Previous assistant] {turn['content']}"
        break
    return out


def enforce_alternation(turns: Sequence[ChatTurn]) -> List[ChatTurn]:
    """Merge same-role runs, then rewrite a leading assistant turn.

    The rewrite runs last, so the rewritten turn is not merged into the user
    turn that follows it.
    """
    return ensure_user_first(merge_consecutive_roles(turns))


__all__ = [
    "ChatTurn",
    "HISTORY_LIMIT",
    "DEFAULT_SYSTEM_PROMPT",
    "ResumptionContext",
    "continuation_note",
    "format_history",
    "merge_content",
    "merge_consecutive_roles",
    "ensure_user_first",
    "enforce_alternation",
]
