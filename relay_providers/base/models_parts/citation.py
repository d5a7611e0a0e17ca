"""Source citation record surfaced by search-enabled vendors."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Citation:
    """A source referenced by a response (``index`` is 1-based)."""

    index: int
    url: str
    title: Optional[str] = None
    snippet: Optional[str] = None
    domain: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


__all__ = ["Citation"]
