"""GELF 1.1 envelope encoding."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict

from ..core.errors import ParsingFailure
from ..utils.time import unix_now
from .chunking import ChunkedMessage, ChunkSize
from .message import Message

if TYPE_CHECKING:
    from .compression import MessageCompression

__all__ = ["GELF_VERSION", "WireMessage"]

GELF_VERSION = "1.1"

_TRIMMED_CHARS = "\" "


class WireMessage:
    """A :class:`Message` plus the contextual fields added at send time.

    This is the only place that knows the GELF field layout.
    """

    __slots__ = ("message", "team", "service")

    def __init__(self, message: Message, team: str | None = None, service: str | None = None) -> None:
        self.message = message
        self.team = team
        self.service = service

    def to_dict(self) -> Dict[str, Any]:
        msg = self.message
        payload: Dict[str, Any] = {
            "version": GELF_VERSION,
            "host": msg.host.strip(_TRIMMED_CHARS),
            "short_message": msg.short_message.strip(_TRIMMED_CHARS),
            "level": int(msg.level),
        }
        if msg.full_message is not None:
            payload["full_message"] = msg.full_message
        payload["timestamp"] = msg.timestamp if msg.timestamp is not None else unix_now()
        if self.team is not None:
            payload["team"] = self.team
        if self.service is not None:
            payload["service"] = self.service
        for key, value in msg.metadata.items():
            payload[f"_{key}"] = value
        return payload

    def to_gelf(self) -> str:
        """Return the GELF/JSON document for this message."""

        try:
            return json.dumps(
                self.to_dict(), ensure_ascii=False, allow_nan=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as exc:
            raise ParsingFailure(f"cannot serialize message: {exc}") from exc

    def to_gelf_bytes(self) -> bytes:
        """Return the UTF-8 encoded GELF/JSON document."""

        document = self.to_gelf()
        try:
            return document.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParsingFailure(f"cannot encode message as UTF-8: {exc}") from exc

    def to_compressed_gelf(self, compression: "MessageCompression") -> bytes:
        return compression.compress(self)

    def to_chunked_message(self, chunk_size: ChunkSize, compression: "MessageCompression") -> ChunkedMessage:
        return ChunkedMessage(chunk_size, self.to_compressed_gelf(compression))
