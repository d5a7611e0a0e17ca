"""xAI (Grok) adapter package."""

from .client import GrokAdapter

__all__ = ["GrokAdapter"]
