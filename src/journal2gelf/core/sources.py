"""Line sources feeding the ingestion loop."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import IO, Iterator, Protocol, Sequence

from .errors import IOFailure, SourceTerminated, UnsupportedPlatform

__all__ = ["LineSource", "StreamSource", "JournalSource", "JOURNALCTL_COMMAND"]

logger = logging.getLogger(__name__)

JOURNALCTL_COMMAND = ("journalctl", "-o", "json", "-f")


class LineSource(Protocol):
    name: str

    def lines(self) -> Iterator[str]:
        ...

    def close(self) -> None:
        ...


class StreamSource:
    """Read lines from a text stream (standard input by default) until EOF."""

    name = "stdin"

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin

    def lines(self) -> Iterator[str]:
        logger.debug("start reading from %s", self.name)
        try:
            for line in self._stream:
                yield line
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailure(f"[IO] reading {self.name} failed: {exc}") from exc

    def close(self) -> None:
        pass


def is_platform_supported(platform: str | None = None) -> bool:
    return (platform or sys.platform).startswith("linux")


class JournalSource:
    """Follow the systemd journal through a ``journalctl`` subprocess.

    The subprocess never ends on its own, so end of output means it died; its
    standard error becomes the reason reported to the caller.
    """

    name = "journalctl"

    def __init__(self, command: Sequence[str] = JOURNALCTL_COMMAND, platform: str | None = None) -> None:
        self._command = list(command)
        self._platform = platform
        self._process: subprocess.Popen[str] | None = None

    def _spawn(self) -> subprocess.Popen[str]:
        if not is_platform_supported(self._platform):
            raise UnsupportedPlatform("[Internal] operating system currently unsupported")
        try:
            return subprocess.Popen(
                self._command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise IOFailure(f"[IO] cannot start {' '.join(self._command)}: {exc}") from exc

    def lines(self) -> Iterator[str]:
        process = self._process = self._spawn()
        assert process.stdout is not None and process.stderr is not None
        logger.debug("start reading from %s (pid %s)", self.name, process.pid)
        for line in process.stdout:
            yield line
        reason = process.stderr.read().strip()
        returncode = process.wait()
        if not reason:
            reason = f"{self._command[0]} exited with code {returncode}"
        raise SourceTerminated(f"[Internal] {reason}")

    def close(self) -> None:
        process = self._process
        if process is None or process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
