"""journal2gelf public API."""

from .api import configure_logging, get_logger, serve
from .core.transform import transform_record
from .gelf import ChunkedMessage, ChunkSize, Message, MessageCompression, MessageLevel, SystemLevel, WireMessage
from .version import __version__

__all__ = [
    "ChunkSize",
    "ChunkedMessage",
    "Message",
    "MessageCompression",
    "MessageLevel",
    "SystemLevel",
    "WireMessage",
    "configure_logging",
    "get_logger",
    "serve",
    "transform_record",
    "__version__",
]
