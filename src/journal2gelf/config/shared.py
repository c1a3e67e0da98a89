"""Configuration shared between the ingestion loop and the config watcher."""

from __future__ import annotations

import logging
import threading
from dataclasses import fields
from typing import List

from .schema import Config, WatchedConfig

__all__ = ["SharedConfig", "merge_watched"]

logger = logging.getLogger(__name__)


class SharedConfig:
    """Lock-guarded configuration plus a change flag.

    The watcher is the only writer and the ingestion loop the only reader.
    The flag is polled without blocking once per processed record, so a new
    configuration is picked up after at most one iteration.
    """

    def __init__(self, config: Config) -> None:
        self._lock = threading.Lock()
        self._config = config.copy()
        self._changed = threading.Event()

    def snapshot(self) -> Config:
        with self._lock:
            return self._config.copy()

    def replace_watched(self, watched: WatchedConfig) -> None:
        with self._lock:
            self._config.watched = watched.copy()
            self._changed.set()

    @property
    def changed(self) -> bool:
        return self._changed.is_set()

    def take_change(self) -> WatchedConfig | None:
        """Return the new watched settings if they changed since the last call."""

        if not self._changed.is_set():
            return None
        with self._lock:
            watched = self._config.watched.copy()
            self._changed.clear()
        return watched


def merge_watched(current: WatchedConfig, incoming: WatchedConfig) -> List[str]:
    """Copy fields that differ from ``incoming`` into ``current``.

    Returns the names of the fields that changed.
    """

    changed: List[str] = []
    for spec in fields(current):
        old = getattr(current, spec.name)
        new = getattr(incoming, spec.name)
        if old == new:
            continue
        logger.info("config changed: %s: %s -> %s", spec.name, _display(old), _display(new))
        setattr(current, spec.name, new)
        changed.append(spec.name)
    return changed


def _display(value: object) -> str:
    return "unset" if value is None else str(value)
