"""OpenAI Responses API streaming helpers.

Responsibilities
----------------
- Convert chat-style turns into Responses ``input`` items
  (``input_text`` / ``input_image`` / ``input_file`` for user turns,
  ``output_text`` for assistant turns).
- Translate Responses SSE frames into canonical stream events.

Event handling
--------------
``response.output_text.delta`` and ``response.delta`` carry text.
``response.output_text.done`` ends the stream; its final text is delivered
when no delta was seen and inline markdown links in it become citations.
``response.completed`` ends the stream too and contributes the final text
once when no delta was seen. ``response.error`` fails the stream. Every other frame is forwarded as a raw vendor event.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.citations import extract_markdown_citations
from ..base.errors import APIError, extract_sse_error_message
from ..base.history import ChatTurn
from ..base.streaming import Citations, Done, RawVendorEvent, StreamError, TextDelta

TEXT_DELTA_EVENTS = ("response.output_text.delta", "response.delta")


def _input_part(part: Dict[str, Any], assistant: bool) -> Optional[Dict[str, Any]]:
    ptype = part.get("type")
    if ptype == "text" and part.get("text"):
        return {"type": "output_text" if assistant else "input_text", "text": part["text"]}
    if assistant:
        return None
    if ptype == "image_url" and isinstance(part.get("image_url"), dict):
        return {"type": "input_image", "image_url": part["image_url"].get("url")}
    if ptype == "file" and isinstance(part.get("file"), dict):
        return {
            "type": "input_file",
            "filename": part["file"].get("file_name"),
            "file_data": part["file"].get("file_data"),
        }
    return None


def to_responses_input(turns: Sequence[ChatTurn]) -> List[Dict[str, Any]]:
    """Map chat turns to Responses ``input`` items (system turns are skipped)."""
    items: List[Dict[str, Any]] = []
    for turn in turns:
        role = turn["role"]
        if role == "system":
            continue
        assistant = role == "assistant"
        content = turn["content"]
        if isinstance(content, str):
            parts = [{"type": "output_text" if assistant else "input_text", "text": content}]
        else:
            parts = [p for p in (_input_part(c, assistant) for c in content) if p is not None]
        items.append({"role": role, "content": parts})
    return items


def _pick_text(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    text = node.get("text")
    if isinstance(text, str):
        return text
    if isinstance(text, dict) and isinstance(text.get("value"), str):
        return text["value"]
    return ""


def extract_output_text(root: Any) -> str:
    """Collect ``output_text`` and ``refusal`` text from a Responses payload."""
    res = root.get("response", root) if isinstance(root, dict) else root
    output = res.get("output") if isinstance(res, dict) else None
    if not isinstance(output, list):
        return ""
    texts: List[str] = []
    for item in output:
        if not isinstance(item, dict):
            continue
        itype = item.get("type") or ""
        if "output_text" in itype or "refusal" in itype:
            value = _pick_text(item)
            if value:
                texts.append(value)
        elif itype != "message":
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and part.get("type") in ("output_text", "refusal"):
                value = _pick_text(part)
                if value:
                    texts.append(value)
    return "".join(texts)


class ResponsesTranslator:
    """Translator for one Responses API stream."""

    def __init__(self, provider: str = "openai") -> None:
        self.provider = provider
        self._saw_text = False

    def _text(self, text: str) -> List[object]:
        self._saw_text = True
        return [TextDelta(text)]

    def __call__(self, event_name: str, data: str) -> List[object]:
        if not data or data.strip() == "[DONE]":
            return []
        try:
            obj = json.loads(data)
        except ValueError:
            return []
        if not isinstance(obj, dict):
            return []
        etype = obj.get("type") if event_name == "message" else event_name
        etype = etype or ""
        out: List[object] = []
        if etype not in TEXT_DELTA_EVENTS:
            out.append(RawVendorEvent(etype, obj))

        if etype == "response.output_text.delta":
            delta = obj.get("delta")
            if isinstance(delta, str) and delta:
                out.extend(self._text(delta))
        elif etype == "response.delta":
            delta = obj.get("delta")
            if isinstance(delta, dict) and delta.get("type") == "output_text.delta" and isinstance(delta.get("text"), str):
                out.extend(self._text(delta["text"]))
        elif etype in ("response.error", "error"):
            message = extract_sse_error_message(obj, "Upstream error")
            error = APIError.streaming_failed(self.provider, message, retryable=False)
            out.append(StreamError(message=message, retryable=False, error=error))
        elif etype == "response.output_text.done":
            final = obj.get("text") if isinstance(obj.get("text"), str) else ""
            if final and not self._saw_text:
                out.extend(self._text(final))
            citations = extract_markdown_citations(final)
            if citations:
                out.append(Citations(tuple(citations)))
            out.append(Done())
        elif etype == "response.completed":
            if not self._saw_text:
                final = extract_output_text(obj)
                if final:
                    out.extend(self._text(final))
            out.append(Done())
        return out


__all__ = ["ResponsesTranslator", "to_responses_input", "extract_output_text"]
