"""OpenAI adapter package (Chat Completions send, Responses API stream)."""

from .client import ChatGPTAdapter

__all__ = ["ChatGPTAdapter"]
