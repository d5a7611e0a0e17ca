"""OpenRouter adapter package."""

from .client import OpenRouterAdapter

__all__ = ["OpenRouterAdapter"]
