"""Payload compression algorithms supported by GELF."""

from __future__ import annotations

import gzip
import zlib
from enum import Enum
from typing import TYPE_CHECKING

from ..core.errors import CompressionFailure

if TYPE_CHECKING:
    from .wire import WireMessage

__all__ = ["MessageCompression"]


class MessageCompression(str, Enum):
    """Compression applied to a serialized GELF document."""

    NONE = "none"
    GZIP = "gzip"
    ZLIB = "zlib"

    @classmethod
    def default(cls) -> "MessageCompression":
        return cls.GZIP

    @classmethod
    def from_name(cls, name: str) -> "MessageCompression":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"unknown compression algorithm: {name!r}") from None

    def compress_bytes(self, data: bytes) -> bytes:
        """Apply this algorithm to ``data``."""

        try:
            if self is MessageCompression.GZIP:
                return gzip.compress(data)
            if self is MessageCompression.ZLIB:
                return zlib.compress(data)
        except (OSError, zlib.error) as exc:
            raise CompressionFailure(f"{self.value} compression failed: {exc}") from exc
        return data

    def compress(self, message: "WireMessage") -> bytes:
        """Serialize ``message`` to GELF/JSON and compress it."""

        return self.compress_bytes(message.to_gelf_bytes())

    def __str__(self) -> str:
        return self.value
