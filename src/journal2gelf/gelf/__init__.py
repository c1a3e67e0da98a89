"""GELF message model, encoding, compression and chunking."""

from .chunking import ChunkedMessage, ChunkSize
from .compression import MessageCompression
from .levels import MessageLevel, SystemLevel
from .message import Message
from .wire import GELF_VERSION, WireMessage

__all__ = [
    "GELF_VERSION",
    "ChunkSize",
    "ChunkedMessage",
    "Message",
    "MessageCompression",
    "MessageLevel",
    "SystemLevel",
    "WireMessage",
]
