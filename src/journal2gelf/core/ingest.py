"""The ingestion loop: read a line, transform it, chunk it, send it."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..config.schema import Config
from ..config.shared import SharedConfig, merge_watched
from ..gelf.chunking import ChunkedMessage, ChunkSize
from .errors import (
    ChunkCapacityExceeded,
    CompressionFailure,
    InsufficientLogLevel,
    NoMessage,
    ParsingFailure,
)
from .sender import UDPSender
from .sources import LineSource
from .transform import transform_record

__all__ = ["IngestStats", "IngestionLoop"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestStats:
    lines: int = 0
    accepted: int = 0
    filtered: int = 0
    skipped: int = 0
    failed: int = 0
    datagrams: int = 0
    reloads: int = 0


class IngestionLoop:
    """Process records one by one against a private copy of the configuration.

    Before each record the loop polls the shared change flag and merges any
    new watched settings, so a reload is visible on the next record.
    """

    def __init__(
        self,
        shared: SharedConfig,
        sender: UDPSender | None = None,
        *,
        chunk_size: ChunkSize = ChunkSize.WAN,
    ) -> None:
        self._shared = shared
        self._config = shared.snapshot()
        self._chunk_size = chunk_size
        self._sender = sender if sender is not None else UDPSender.bind(self._config.global_config.sender_port)
        self.stats = IngestStats()

    @property
    def config(self) -> Config:
        return self._config

    def reload_if_changed(self) -> bool:
        incoming = self._shared.take_change()
        if incoming is None:
            return False
        if merge_watched(self._config.watched, incoming):
            self.stats.reloads += 1
        return True

    def handle_line(self, line: str) -> int:
        """Process one raw record; returns the number of datagrams sent."""

        self.stats.lines += 1
        self.reload_if_changed()
        watched = self._config.watched

        try:
            payload = transform_record(line, watched)
        except InsufficientLogLevel:
            self.stats.filtered += 1
            return 0
        except NoMessage:
            logger.debug("no message field found")
            self.stats.skipped += 1
            return 0
        except (ParsingFailure, CompressionFailure) as exc:
            logger.warning("parsing error: %s, message: %s", exc, line)
            self.stats.failed += 1
            return 0

        try:
            chunked = ChunkedMessage(self._chunk_size, payload)
        except ChunkCapacityExceeded as exc:
            logger.error("dropping message: %s", exc)
            self.stats.failed += 1
            return 0

        sent = self._sender.send_all(chunked, watched.target)
        self.stats.accepted += 1
        self.stats.datagrams += sent
        return sent

    def run(self, source: LineSource, stop_event: threading.Event | None = None) -> IngestStats:
        """Consume ``source`` until it ends or ``stop_event`` is set.

        Errors raised by the source itself are fatal and propagate.
        """

        try:
            for raw in source.lines():
                if stop_event is not None and stop_event.is_set():
                    logger.debug("stop requested, leaving %s loop", source.name)
                    break
                line = raw.strip()
                if not line:
                    continue
                self.handle_line(line)
        finally:
            source.close()
        return self.stats

    def close(self) -> None:
        self._sender.close()
