"""
Non-streaming call result types.

`SendResult` is what ``send_message`` returns: the full response text, the
model id the vendor reports having used, optional token usage and optional
citations (exposed through ``metadata`` as ``{"citations": [...]}``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .citation import Citation


@dataclass(frozen=True)
class Usage:
    """Token accounting reported by the vendor."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> "Usage":
        p = int(prompt or 0)
        c = int(completion or 0)
        return cls(prompt_tokens=p, completion_tokens=c, total_tokens=int(total) if total else p + c)


@dataclass(frozen=True)
class SendResult:
    """Outcome of a single round-trip ``send_message`` call."""

    response: str
    model_used: str
    usage: Optional[Usage] = None
    citations: Optional[List[Citation]] = None

    @property
    def metadata(self) -> Optional[Dict[str, Any]]:
        """Return ``{"citations": [...]}`` when citations exist, else ``None``."""
        if not self.citations:
            return None
        return {"citations": [c.to_dict() for c in self.citations]}


__all__ = ["SendResult", "Usage"]
