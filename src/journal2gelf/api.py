"""Public API surface for journal2gelf."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict

from .config.loader import find_config_file, load_configuration, load_watched
from .config.schema import Config, LogSource
from .config.shared import SharedConfig
from .config.watcher import DEFAULT_DEBOUNCE_S, ConfigWatcher
from .core.errors import Journal2GelfError
from .core.ingest import IngestionLoop, IngestStats
from .core.sources import JournalSource, LineSource, StreamSource
from .handlers.console import ConsoleHandlerConfig, build_console_handler

__all__ = ["configure_logging", "get_logger", "build_source", "serve"]

_PACKAGE_LOGGER = "journal2gelf"
_HANDLER: logging.Handler | None = None
_WATCHER_JOIN_TIMEOUT_S = 5.0

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO, *, stream: str = "stderr") -> logging.Handler:
    """Install the console handler on the package logger, replacing a previous one."""

    global _HANDLER
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    if _HANDLER is not None:
        package_logger.removeHandler(_HANDLER)
        _HANDLER.close()
    handler = build_console_handler(ConsoleHandlerConfig(level=level, stream=stream))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
    _HANDLER = handler
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package namespace."""

    if name == _PACKAGE_LOGGER or name.startswith(_PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_PACKAGE_LOGGER}.{name}")


def build_source(config: Config) -> LineSource:
    if config.global_config.log_source is LogSource.JOURNAL:
        return JournalSource()
    return StreamSource()


def serve(
    config_path: Path | None = None,
    overrides: Dict[str, Any] | None = None,
    *,
    stop_event: threading.Event | None = None,
    source: LineSource | None = None,
    debounce_s: float = DEFAULT_DEBOUNCE_S,
) -> IngestStats:
    """Load the configuration, start the watcher and run the ingestion loop.

    Blocks until the source ends, ``stop_event`` is set, or a fatal error is
    raised.
    """

    stop_event = stop_event or threading.Event()
    path = config_path if config_path is not None else find_config_file()
    config = load_configuration(path, overrides)
    shared = SharedConfig(config)

    watcher_thread: threading.Thread | None = None
    if path is not None:
        watcher = ConfigWatcher(
            path,
            shared,
            lambda p: load_watched(p, overrides),
            debounce_s=debounce_s,
        )
        watcher_thread = watcher.start(stop_event)
        logger.info("using configuration %s (hot reload enabled)", path)
    else:
        logger.info("no configuration file found, using defaults and command line options")

    loop: IngestionLoop | None = None
    try:
        loop = IngestionLoop(shared)
        src = source if source is not None else build_source(config)
        logger.info(
            "forwarding %s to %s (compression=%s)",
            config.global_config.log_source,
            config.watched.graylog_addr,
            config.watched.compression,
        )
        return loop.run(src, stop_event)
    except Journal2GelfError as exc:
        logger.error("%s processing stopped: %s", config.global_config.log_source, exc)
        raise
    finally:
        stop_event.set()
        if loop is not None:
            loop.close()
        if watcher_thread is not None:
            watcher_thread.join(timeout=_WATCHER_JOIN_TIMEOUT_S)
