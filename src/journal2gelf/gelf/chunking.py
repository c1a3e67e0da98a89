"""GELF UDP chunking.

Payloads larger than one datagram are split into at most 128 chunks. Each
chunk carries a 12 byte header::

    0x1e 0x0f | message id (8 bytes) | sequence (1 byte) | total (1 byte)

Receivers reassemble chunks sharing a message id, in sequence order.
"""

from __future__ import annotations

import math
import os
from enum import IntEnum
from typing import Iterator, List

from ..core.errors import ChunkCapacityExceeded

__all__ = [
    "CHUNK_MAGIC",
    "CHUNK_HEADER_SIZE",
    "MAX_CHUNKS",
    "MESSAGE_ID_SIZE",
    "ChunkSize",
    "ChunkedMessage",
]

CHUNK_MAGIC = b"\x1e\x0f"
MESSAGE_ID_SIZE = 8
CHUNK_HEADER_SIZE = len(CHUNK_MAGIC) + MESSAGE_ID_SIZE + 2
MAX_CHUNKS = 128


class ChunkSize(IntEnum):
    """Maximum datagram size, header included."""

    WAN = 1420
    LAN = 8154

    @property
    def body_size(self) -> int:
        return int(self) - CHUNK_HEADER_SIZE


class ChunkedMessage:
    """A compressed GELF payload split into ready-to-send datagrams."""

    __slots__ = ("chunk_size", "message_id", "_bodies", "_datagrams")

    def __init__(self, chunk_size: ChunkSize, payload: bytes, message_id: bytes | None = None) -> None:
        body_size = chunk_size.body_size
        total = max(1, math.ceil(len(payload) / body_size))
        if total > MAX_CHUNKS:
            raise ChunkCapacityExceeded(
                f"failed to split message on {int(chunk_size)}-bytes chunks: "
                f"{len(payload)} bytes need {total} chunks, limit is {MAX_CHUNKS}"
            )
        if message_id is None:
            message_id = os.urandom(MESSAGE_ID_SIZE)
        elif len(message_id) != MESSAGE_ID_SIZE:
            raise ValueError(f"message id must be {MESSAGE_ID_SIZE} bytes")

        self.chunk_size = chunk_size
        self.message_id = message_id
        self._bodies: List[bytes] = [
            payload[index * body_size : (index + 1) * body_size] for index in range(total)
        ]
        if total == 1:
            self._datagrams = [payload]
        else:
            self._datagrams = [
                CHUNK_MAGIC + message_id + bytes((sequence, total)) + body
                for sequence, body in enumerate(self._bodies)
            ]

    @property
    def total(self) -> int:
        return len(self._datagrams)

    @property
    def is_chunked(self) -> bool:
        return self.total > 1

    def bodies(self) -> Iterator[bytes]:
        """Yield the payload slices in sequence order, without headers."""

        return iter(self._bodies)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._datagrams)

    def __len__(self) -> int:
        return self.total

    def __repr__(self) -> str:
        return f"ChunkedMessage(id={self.message_id.hex()}, total={self.total})"
