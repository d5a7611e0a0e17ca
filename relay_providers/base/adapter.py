"""Provider adapter base class.

Purpose:
    Give every vendor the same three entry points:

    * ``send_message``: one blocking request, full response as :class:`SendResult`.
    * ``stream_events``: the canonical event sequence (``TextDelta``...,
      optional ``Citations``, then exactly one ``Done`` or ``StreamError``).
    * ``stream_message``: text-only view over ``stream_events`` that raises
      the typed error instead of yielding ``StreamError``.

    Subclasses implement two hooks, ``_send`` and ``_stream``, working on a
    resolved :class:`ChatRequest`. Everything else (model alias resolution,
    header construction, error normalization, raw-event dispatch, logging) is
    shared here.

External dependencies:
    ``httpx`` for HTTP; the client is either injected (tests pass a client
    built on ``httpx.MockTransport``) or taken from the shared pool.

Failure modes:
    ``send_message`` raises :class:`AppError` subclasses only; any other
    exception is passed through :func:`normalize_error` first. Streaming
    failures surface as a terminal ``StreamError`` (``stream_events``) or a
    raised ``AppError`` (``stream_message``).

Timeout strategy:
    Connect and request timeouts come from the pooled client's
    ``httpx.Timeout``; stream idle time is bounded by the bridge using
    ``get_timeout_config().stream_timeout_seconds``.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

import httpx

from ..config.defaults import resolve_model_alias
from .cancellation import CancellationToken
from .dto import AdapterParams
from .errors import APIError, AppError, ValidationError, extract_sse_error_message, normalize_error
from .history import DEFAULT_SYSTEM_PROMPT, ChatTurn, ResumptionContext, format_history
from .http import get_httpx_client
from .logging import LogContext, get_logger, normalized_log_event
from .models import AdapterCapabilities, Message, MessageAttachment, ProviderConfig, SendResult
from .streaming import (
    Citations,
    Done,
    RawVendorEvent,
    StreamError,
    StreamEvent,
    TextDelta,
    run_sse_stream,
    simulate_stream,
)
from .streaming.metrics import StreamMetrics, log_stream_end

SideEventHandler = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class ChatRequest:
    """One resolved adapter call handed to the vendor hooks."""

    message: str
    history: Sequence[Message]
    model: str
    attachments: Sequence[MessageAttachment] = ()
    resumption: Optional[ResumptionContext] = None
    extra: Dict[str, Any] = field(default_factory=dict)


class BaseAdapter(ABC):
    """Common behaviour for vendor adapters.

    Class attributes:
        provider_id: Canonical provider key (``"openai"``); also the value
            ``Message.provider_id`` carries for this vendor's own turns.
        display_name: Human label for the vendor.
        error_label: Prefix of HTTP error messages (default ``"<provider_id> API"``).
    """

    provider_id: str = "base"
    display_name: str = "Base"
    error_label: Optional[str] = None

    def __init__(
        self,
        params: Optional[AdapterParams] = None,
        *,
        client: Optional[httpx.Client] = None,
        **overrides: Any,
    ) -> None:
        params = params or AdapterParams(provider=self.provider_id)
        if overrides:
            params = params.model_copy(update=overrides)
        self.params = params
        self.config: ProviderConfig = self.build_provider_config()
        self._client = client
        self._logger = get_logger(f"relay.providers.{self.provider_id}")

    # ---------------------------------------------------------------- config
    @abstractmethod
    def build_provider_config(self) -> ProviderConfig:
        """Return this vendor's static wiring (base URL, default model, headers)."""

    @property
    def base_url(self) -> str:
        return (self.params.base_url or self.config.base_url).rstrip("/")

    @property
    def client(self) -> httpx.Client:
        if self._client is not None:
            return self._client
        return get_httpx_client(self.base_url, self.provider_id)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_capabilities(self, model: Optional[str] = None) -> AdapterCapabilities:  # noqa: ARG002 - model-aware in subclasses
        """Capabilities for ``model`` (defaults to the configured model)."""
        return self.config.capabilities

    def resolve_model(self, model_override: Optional[str] = None) -> str:
        """Per-call override, then configured model, then vendor default; aliases resolved."""
        return resolve_model_alias(model_override or self.params.model or self.config.default_model)

    def system_prompt(self) -> str:
        return self.params.system_prompt or DEFAULT_SYSTEM_PROMPT

    def headers(self, **extra: str) -> Dict[str, str]:
        """Authentication headers plus configured and per-request extras."""
        if not self.params.api_key:
            raise ValidationError.api_key_invalid(self.provider_id)
        headers = dict(self.config.build_headers(self.params.api_key))
        headers.update(self.params.headers)
        headers.update(extra)
        return headers

    def log_context(self, model: Optional[str] = None) -> LogContext:
        return LogContext(provider=self.provider_id, model=model)

    # --------------------------------------------------------------- history
    def format_history(
        self,
        history: Sequence[Message],
        resumption: Optional[ResumptionContext] = None,
    ) -> List[ChatTurn]:
        return format_history(
            history,
            provider_id=self.provider_id,
            debate_mode=self.params.debate_mode,
            resumption=resumption,
        )

    def format_user_message(
        self,
        message: str,
        attachments: Optional[Sequence[MessageAttachment]] = None,  # noqa: ARG002 - vendor specific
        model: Optional[str] = None,  # noqa: ARG002 - vendor specific
    ) -> Any:
        """Return the vendor content for the new user turn (plain text by default)."""
        return message

    # ------------------------------------------------------------------ http
    def handle_api_error(self, response: httpx.Response) -> APIError:
        """Build the typed error for a non-2xx vendor response.

        The vendor's own ``error.message`` is preferred; the status phrase is
        used when the body carries nothing readable. Text that does not match
        the status (e.g. a 500 without availability wording) is reworded the
        same way as on the streaming path.
        """
        try:
            body = response.text
        except httpx.ResponseNotRead:
            body = response.read().decode("utf-8", errors="replace")
        default = response.reason_phrase or "Unknown error"
        message = extract_sse_error_message({"data": body, "status": response.status_code}, default)
        return APIError.from_http_status(
            response.status_code,
            self.provider_id,
            message,
            label=self.error_label or f"{self.provider_id} API",
        )

    def _post_json(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            APIError: non-2xx status or an undecodable body.
            AppError: transport failures, normalized (usually ``NetworkError``).
        """
        try:
            response = self.client.post(
                self.url(path),
                json=payload,
                headers=headers if headers is not None else self.headers(),
                params=params,
            )
        except httpx.HTTPError as exc:
            raise normalize_error(exc, {"provider": self.provider_id, "phase": "send"}) from exc
        if response.status_code >= 400:
            raise self.handle_api_error(response)
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise APIError.from_http_status(
                502,
                self.provider_id,
                "Invalid JSON in response",
                label=self.error_label or f"{self.provider_id} API",
            ) from exc

    def _sse(
        self,
        path: str,
        payload: Mapping[str, Any],
        translator: Callable[[str, str], Sequence[object]],
        *,
        cancel_token: Optional[CancellationToken],
        headers: Optional[Dict[str, str]] = None,
        default_error_message: str = "Connection failed",
    ) -> Iterator[object]:
        """Run a wire-level SSE stream through ``translator``."""
        return run_sse_stream(
            self.client,
            self.url(path),
            provider=self.provider_id,
            translator=translator,
            json=payload,
            headers=headers if headers is not None else self.headers(Accept="text/event-stream"),
            cancel_token=cancel_token,
            default_error_message=default_error_message,
        )

    def _simulated(self, request: ChatRequest, cancel_token: Optional[CancellationToken]) -> Iterator[object]:
        """Blocking request re-chunked as a stream (used where the wire stream lacks metadata)."""
        if cancel_token is not None and cancel_token.cancelled:
            return iter((Done(cancelled=True),))
        result = self._send(request)
        return simulate_stream(result.response, citations=result.citations, cancel_token=cancel_token)

    # ----------------------------------------------------------------- hooks
    @abstractmethod
    def _send(self, request: ChatRequest) -> SendResult:
        """Perform the blocking vendor call."""

    @abstractmethod
    def _stream(self, request: ChatRequest, cancel_token: Optional[CancellationToken]) -> Iterator[object]:
        """Yield canonical events plus ``RawVendorEvent`` items for one call."""

    # ------------------------------------------------------------ public api
    def _request(
        self,
        message: str,
        history: Sequence[Message],
        attachments: Optional[Sequence[MessageAttachment]],
        resumption_context: Optional[ResumptionContext],
        model_override: Optional[str],
    ) -> ChatRequest:
        return ChatRequest(
            message=message,
            history=tuple(history or ()),
            model=self.resolve_model(model_override),
            attachments=tuple(attachments or ()),
            resumption=resumption_context,
        )

    def send_message(
        self,
        message: str,
        history: Sequence[Message],
        resumption_context: Optional[ResumptionContext] = None,
        attachments: Optional[Sequence[MessageAttachment]] = None,
        model_override: Optional[str] = None,
    ) -> SendResult:
        """Send one message and return the full response."""
        request = self._request(message, history, attachments, resumption_context, model_override)
        ctx = self.log_context(request.model)
        normalized_log_event(self._logger, "request.start", ctx, phase="start", attempt=1)
        try:
            result = self._send(request)
        except AppError as err:
            normalized_log_event(
                self._logger,
                "request.error",
                ctx,
                phase="finalize",
                error_code=err.code.value,
                emitted=False,
                level=logging.WARNING,
                error=err.message,
            )
            raise
        except Exception as exc:  # noqa: BLE001 - converted into the typed taxonomy
            err = normalize_error(exc, {"provider": self.provider_id, "phase": "send"})
            normalized_log_event(
                self._logger,
                "request.error",
                ctx,
                phase="finalize",
                error_code=err.code.value,
                emitted=False,
                level=logging.WARNING,
                error=err.message,
            )
            raise err from exc
        normalized_log_event(
            self._logger,
            "request.end",
            ctx,
            phase="finalize",
            emitted=bool(result.response),
            tokens=result.usage,
            model_used=result.model_used,
        )
        return result

    def stream_events(
        self,
        message: str,
        history: Sequence[Message],
        attachments: Optional[Sequence[MessageAttachment]] = None,
        resumption_context: Optional[ResumptionContext] = None,
        model_override: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_event: Optional[SideEventHandler] = None,
    ) -> Iterator[StreamEvent]:
        """Yield the canonical event sequence for one streamed call.

        Raw vendor payloads go to ``on_event`` and are never yielded. Errors
        raised while starting the stream (missing key, request building) are
        delivered as a terminal ``StreamError`` like any other failure.
        """
        request = self._request(message, history, attachments, resumption_context, model_override)
        ctx = self.log_context(request.model)
        metrics = StreamMetrics()
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", attempt=1, emitted=False)
        terminal: Optional[StreamEvent] = None
        source: Optional[Iterator[object]] = None
        try:
            source = self._stream(request, cancel_token)
            for item in source:
                if isinstance(item, RawVendorEvent):
                    if on_event is not None:
                        on_event(item.as_side_event())
                    continue
                if isinstance(item, TextDelta):
                    if not item.text:
                        continue
                    metrics.record_delta(item.text)
                elif isinstance(item, (Done, StreamError)):
                    terminal = item
                yield item
                if terminal is not None:
                    break
        except AppError as err:
            terminal = StreamError(message=err.message, retryable=err.retryable, error=err)
            yield terminal
        except Exception as exc:  # noqa: BLE001 - converted into a terminal StreamError
            err = normalize_error(exc, {"provider": self.provider_id, "phase": "stream"})
            terminal = StreamError(message=err.message, retryable=err.retryable, error=err)
            yield terminal
        finally:
            close = getattr(source, "close", None)
            if close is not None:
                close()
            self._log_terminal(ctx, metrics, terminal)
        if terminal is None:
            terminal = Done()
            yield terminal

    def _log_terminal(self, ctx: LogContext, metrics: StreamMetrics, terminal: Optional[StreamEvent]) -> None:
        if isinstance(terminal, StreamError):
            code = terminal.error.code.value if terminal.error is not None else None
            log_stream_end(self._logger, ctx, metrics, outcome="error", error_code=code, error=terminal.message)
        elif isinstance(terminal, Done) and terminal.cancelled:
            log_stream_end(self._logger, ctx, metrics, outcome="cancelled")
        else:
            log_stream_end(self._logger, ctx, metrics, outcome="end")

    def stream_message(
        self,
        message: str,
        history: Sequence[Message],
        attachments: Optional[Sequence[MessageAttachment]] = None,
        resumption_context: Optional[ResumptionContext] = None,
        model_override: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_event: Optional[SideEventHandler] = None,
    ) -> Iterator[str]:
        """Yield response text chunks; raise the typed error on failure.

        Citations are delivered to ``on_event`` as
        ``{"type": "citations", "citations": [...]}``. Cancellation ends the
        iteration silently.
        """
        for event in self.stream_events(
            message,
            history,
            attachments=attachments,
            resumption_context=resumption_context,
            model_override=model_override,
            cancel_token=cancel_token,
            on_event=on_event,
        ):
            if isinstance(event, TextDelta):
                yield event.text
            elif isinstance(event, Citations):
                if on_event is not None:
                    on_event({"type": "citations", "citations": [c.to_dict() for c in event.citations]})
            elif isinstance(event, StreamError):
                if event.error is not None:
                    raise event.error
                raise APIError.streaming_failed(self.provider_id, event.message, retryable=event.retryable)
            elif isinstance(event, Done):
                return


__all__ = ["BaseAdapter", "ChatRequest", "SideEventHandler"]
