"""
Conversation message value type.

`Message` is created by the calling layer and appended to a conversation
list; adapters only read it. ``provider_id`` identifies which vendor produced
an ``ai`` message so that multi-party histories can be re-serialized from the
point of view of the adapter being called.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

SenderType = Literal["user", "ai"]


@dataclass(frozen=True)
class Message:
    """An immutable chat message.

    Attributes:
        id: Caller-assigned identifier.
        sender: Display name of the author (user name or AI label).
        sender_type: ``"user"`` or ``"ai"``.
        content: Plain text body.
        timestamp: Creation time (epoch milliseconds); history order.
        provider_id: Vendor key for ``ai`` messages (``"openai"``, ...).
    """

    id: str
    sender: str
    sender_type: SenderType
    content: str
    timestamp: float
    provider_id: Optional[str] = None

    @property
    def is_user(self) -> bool:
        return self.sender_type == "user"


__all__ = ["Message", "SenderType"]
