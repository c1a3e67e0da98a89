"""Console handler for journal2gelf's own diagnostics."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from ..formatters.text import StructuredTextFormatter

__all__ = ["ConsoleHandlerConfig", "build_console_handler"]

HANDLER_NAME = "journal2gelf-console"


@dataclass(slots=True)
class ConsoleHandlerConfig:
    level: int = logging.INFO
    stream: str = "stderr"
    # ``None`` shows logger names only when debugging
    show_logger: bool | None = None


def build_console_handler(config: ConsoleHandlerConfig | None = None) -> logging.Handler:
    """Build the stream handler used for diagnostics.

    Standard output is left alone by default so it can still be piped.
    """

    cfg = config or ConsoleHandlerConfig()
    stream = sys.stdout if cfg.stream == "stdout" else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(cfg.level)
    show_logger = cfg.level <= logging.DEBUG if cfg.show_logger is None else cfg.show_logger
    handler.setFormatter(StructuredTextFormatter(show_logger=show_logger))
    return handler
