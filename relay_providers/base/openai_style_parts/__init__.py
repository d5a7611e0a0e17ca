"""Split modules for the OpenAI-compatible adapter base.

- ``adapter``: request building, send and stream hooks
- ``translator``: Chat Completions SSE frame translation

Re-exports provide a stable import surface for convenience.
"""

from .adapter import OpenAICompatibleAdapter
from .translator import DONE_SENTINEL, ChatCompletionsTranslator

__all__ = [
    "OpenAICompatibleAdapter",
    "ChatCompletionsTranslator",
    "DONE_SENTINEL",
]
