"""Polling watcher that hot-reloads the configuration file."""

from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, Tuple

from ..core.errors import ConfigurationError
from .schema import WatchedConfig
from .shared import SharedConfig

__all__ = ["ConfigWatcher", "DEFAULT_DEBOUNCE_S", "DEFAULT_POLL_INTERVAL_S"]

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_S = 2.0
DEFAULT_POLL_INTERVAL_S = 0.5

_Signature = Tuple[int, int, int]


def _signature(path: Path) -> _Signature:
    st = os.stat(path)
    return (st.st_mtime_ns, st.st_size, st.st_ino)


class ConfigWatcher:
    """Watch ``path`` and push re-parsed settings into ``shared``.

    A write is applied once the file has stayed unchanged for ``debounce_s``
    seconds, so editors writing in several steps trigger a single reload. A
    file that fails to parse is reported and the last good configuration
    stays active. Deleting or moving the file is reported but does not stop
    the watcher; the file is picked up again when it reappears.
    """

    def __init__(
        self,
        path: Path,
        shared: SharedConfig,
        loader: Callable[[Path], WatchedConfig],
        *,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self._path = Path(path)
        self._shared = shared
        self._loader = loader
        self._debounce_s = debounce_s
        self._poll_interval_s = poll_interval_s
        self._missing = False
        self._pending: _Signature | None = None
        self._pending_since = 0.0
        self.reload_count = 0
        try:
            self._applied: _Signature | None = _signature(self._path)
        except FileNotFoundError:
            self._applied = None
            self._missing = True

    @property
    def path(self) -> Path:
        return self._path

    def poll_once(self, now: float | None = None) -> bool:
        """Check the file once; returns ``True`` if a new configuration was applied."""

        if now is None:
            now = time.monotonic()

        try:
            current = _signature(self._path)
        except FileNotFoundError:
            if not self._missing:
                logger.warning(
                    "config file %s was removed or moved; keeping last good configuration",
                    self._path,
                )
                self._missing = True
                self._applied = None
            self._pending = None
            return False
        except OSError as exc:
            logger.error("cannot stat config file %s: %s", self._path, exc)
            return False

        if self._missing:
            logger.info("config file %s appeared", self._path)
            self._missing = False

        if current == self._applied:
            self._pending = None
            return False

        if current != self._pending:
            self._pending = current
            self._pending_since = now
            return False

        if now - self._pending_since < self._debounce_s:
            return False

        self._pending = None
        self._applied = current
        return self._reload()

    def _reload(self) -> bool:
        try:
            watched = self._loader(self._path)
        except ConfigurationError as exc:
            logger.error("config reload from %s failed, keeping previous settings: %s", self._path, exc)
            return False
        self._shared.replace_watched(watched)
        self.reload_count += 1
        logger.debug("config reloaded from %s", self._path)
        return True

    def run(self, stop_event: threading.Event) -> None:
        """Poll until ``stop_event`` is set."""

        logger.debug(
            "watching %s (poll=%.2fs, debounce=%.2fs)",
            self._path,
            self._poll_interval_s,
            self._debounce_s,
        )
        while not stop_event.wait(self._poll_interval_s):
            try:
                self.poll_once()
            except Exception:
                logger.exception("unexpected error while watching %s", self._path)

    def start(self, stop_event: threading.Event) -> threading.Thread:
        thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name="journal2gelf-config-watcher",
            daemon=True,
        )
        thread.start()
        return thread
