"""OpenAICompatibleAdapter implementation.

Purpose:
- Reusable base for vendors exposing an OpenAI-compatible Chat Completions
  endpoint (``POST {base_url}/chat/completions``). Concrete adapters supply
  only a :class:`ProviderConfig` and, where needed, model quirk rules or a
  different user-content encoding.

Request shape:
- ``messages = [system?, *history, user]`` with strict alternation enforced
  (leading assistant turn rewritten, same-role turns merged).
- ``temperature`` / ``max_tokens`` / ``top_p`` are sent only when configured;
  :attr:`model_quirks` may force a temperature, rename the token limit
  parameter, drop ``top_p`` or drop the system turn.

Streaming:
- Same payload with ``stream: true`` through :class:`ChatCompletionsTranslator`.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..adapter import BaseAdapter, ChatRequest
from ..cancellation import CancellationToken
from ..history import ChatTurn, enforce_alternation
from ..models import MessageAttachment, SendResult, Usage
from ..quirks import ModelQuirk, ResolvedQuirks, resolve_quirks
from .translator import ChatCompletionsTranslator


class OpenAICompatibleAdapter(BaseAdapter):
    """Chat Completions adapter base."""

    chat_path: str = "/chat/completions"
    model_quirks: Sequence[ModelQuirk] = ()
    default_temperature: Optional[float] = None

    def quirks_for(self, model: str) -> ResolvedQuirks:
        return resolve_quirks(model, self.model_quirks)

    # ------------------------------------------------------------- content
    def format_user_message(
        self,
        message: str,
        attachments: Optional[Sequence[MessageAttachment]] = None,
        model: Optional[str] = None,
    ) -> Any:
        """Plain text, or ``text`` + ``image_url`` parts when images are supported.

        Documents are not encoded at this level; each one is replaced by a
        note so the model knows something was attached.
        """
        caps = self.get_capabilities(model)
        if not attachments or not caps.attachments:
            return message
        parts: List[Dict[str, Any]] = [{"type": "text", "text": message}]
        images = [a for a in attachments if a.is_image]
        documents = [a for a in attachments if a.is_document]
        if caps.supports_images:
            parts.extend({"type": "image_url", "image_url": {"url": a.data_uri()}} for a in images)
        elif images:
            parts.append({"type": "text", "text": f"[Image attachments not supported for {self.provider_id}]"})
        if documents:
            self._logger.warning("[%s] Document support not implemented in base adapter", self.provider_id)
            parts.append({"type": "text", "text": f"[Document attachments not supported for {self.provider_id}]"})
        return parts

    def build_messages(self, request: ChatRequest, quirks: Optional[ResolvedQuirks] = None) -> List[ChatTurn]:
        quirks = quirks or self.quirks_for(request.model)
        turns: List[ChatTurn] = []
        if not quirks.forbids_system_role:
            turns.append({"role": "system", "content": self.system_prompt()})
        turns.extend(self.format_history(request.history, request.resumption))
        turns.append(
            {
                "role": "user",
                "content": self.format_user_message(request.message, request.attachments, request.model),
            }
        )
        return enforce_alternation(turns)

    def generation_params(self, model: str) -> Dict[str, Any]:
        """Sampling and length parameters after quirk adjustment."""
        quirks = self.quirks_for(model)
        out: Dict[str, Any] = {}
        temperature = quirks.temperature(self.params.temperature, self.default_temperature)
        if temperature is not None:
            out["temperature"] = temperature
        if self.params.max_tokens is not None:
            out[quirks.token_limit_param] = self.params.max_tokens
        if self.params.top_p is not None and not quirks.omit_top_p:
            out["top_p"] = self.params.top_p
        return out

    def build_payload(self, request: ChatRequest, *, stream: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": self.build_messages(request),
        }
        payload.update(self.generation_params(request.model))
        if stream:
            payload["stream"] = True
        return payload

    # --------------------------------------------------------------- calls
    def parse_response(self, data: Dict[str, Any], request: ChatRequest) -> SendResult:
        choices = data.get("choices") or [{}]
        message = (choices[0] or {}).get("message") or {}
        content = message.get("content") or ""
        usage = data.get("usage")
        return SendResult(
            response=content if isinstance(content, str) else "",
            model_used=data.get("model") or request.model,
            usage=Usage.of(
                usage.get("prompt_tokens"),
                usage.get("completion_tokens"),
                usage.get("total_tokens"),
            )
            if isinstance(usage, dict)
            else None,
        )

    def _send(self, request: ChatRequest) -> SendResult:
        data = self._post_json(self.chat_path, self.build_payload(request))
        return self.parse_response(data, request)

    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]):
        return self._sse(
            self.chat_path,
            self.build_payload(request, stream=True),
            ChatCompletionsTranslator(self.provider_id),
            cancel_token=cancel_token,
        )


__all__ = ["OpenAICompatibleAdapter"]
