"""UDP transport for GELF datagrams."""

from __future__ import annotations

import logging
import socket
from typing import Iterable, Tuple

from .errors import IOFailure

__all__ = ["UDPSender"]

logger = logging.getLogger(__name__)


class UDPSender:
    """A UDP socket bound once for the lifetime of the ingestion loop.

    The destination is passed on every send, so ``sendto`` resolves it again
    each time and address changes apply to the very next datagram.
    """

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    @classmethod
    def bind(cls, port: int = 0, host: str = "0.0.0.0") -> "UDPSender":
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            raise IOFailure(f"[IO] cannot bind UDP socket to {host}:{port}: {exc}") from exc
        logger.debug("sender bound to %s:%s", *sock.getsockname()[:2])
        return cls(sock)

    def send(self, datagram: bytes, target: Tuple[str, int]) -> int:
        try:
            return self._sock.sendto(datagram, target)
        except OSError as exc:
            raise IOFailure(f"[IO] send to {target[0]}:{target[1]} failed: {exc}") from exc

    def send_all(self, datagrams: Iterable[bytes], target: Tuple[str, int]) -> int:
        """Send every datagram; failures are logged and the rest still go out."""

        sent = 0
        for datagram in datagrams:
            try:
                self.send(datagram, target)
            except IOFailure as exc:
                logger.error("sender failure: %s", exc)
                continue
            sent += 1
        return sent

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> "UDPSender":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()
