"""Model parts package (one value type per module)."""

from .attachment import AttachmentType, MessageAttachment
from .capabilities import AdapterCapabilities
from .citation import Citation
from .message import Message, SenderType
from .provider_config import HeaderBuilder, ProviderConfig, bearer_headers
from .send_result import SendResult, Usage

__all__ = [
    "AdapterCapabilities",
    "AttachmentType",
    "Citation",
    "HeaderBuilder",
    "Message",
    "MessageAttachment",
    "ProviderConfig",
    "SendResult",
    "SenderType",
    "Usage",
    "bearer_headers",
]
