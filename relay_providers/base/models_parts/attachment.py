"""
Message attachment value type.

Vendors disagree on how inline files are encoded: some want a
``data:<mime>;base64,<payload>`` URI, others the raw base64 payload.
`MessageAttachment` offers both views so each adapter picks the one its wire
contract requires.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

AttachmentType = Literal["image", "document"]


@dataclass(frozen=True)
class MessageAttachment:
    """Read-only file input for an adapter call.

    Attributes:
        type: ``"image"`` or ``"document"``.
        uri: Source URI (may itself be a ``data:`` URI or a remote URL).
        mime_type: MIME type of the payload.
        base64: Raw base64 payload, when already loaded.
        file_name: Original file name (documents).
    """

    type: AttachmentType
    uri: str
    mime_type: str
    base64: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.type == "image"

    @property
    def is_document(self) -> bool:
        return self.type == "document"

    def data_uri(self) -> str:
        """Return the ``data:`` URI form of this attachment.

        When no base64 payload is loaded the ``uri`` is returned unchanged
        (remote URL or an existing ``data:`` URI).
        """
        if self.uri.startswith("data:"):
            return self.uri
        if self.base64:
            return f"data:{self.mime_type};base64,{self.base64}"
        return self.uri

    def raw_base64(self) -> str:
        """Return the bare base64 payload (``data:`` prefix stripped)."""
        if self.base64:
            return self.base64
        if self.uri.startswith("data:") and "," in self.uri:
            return self.uri.split(",", 1)[1]
        return self.uri


__all__ = ["MessageAttachment", "AttachmentType"]
