"""OpenAI-compatible adapter base (facade over ``openai_style_parts``)."""

from .openai_style_parts import DONE_SENTINEL, ChatCompletionsTranslator, OpenAICompatibleAdapter

__all__ = ["OpenAICompatibleAdapter", "ChatCompletionsTranslator", "DONE_SENTINEL"]
