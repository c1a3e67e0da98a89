"""Human readable text formatter for journal2gelf's own diagnostics."""

from __future__ import annotations

import logging

__all__ = ["StructuredTextFormatter"]

_DEFAULT_FMT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
_SHORT_FMT = "%(asctime)s | %(levelname)-5s | %(message)s"


class StructuredTextFormatter(logging.Formatter):
    """``asctime | level | logger | message`` lines, optionally without the logger name."""

    def __init__(self, *, show_logger: bool = True, fmt: str | None = None, datefmt: str | None = "%Y-%m-%d %H:%M:%S") -> None:
        final_fmt = fmt or (_DEFAULT_FMT if show_logger else _SHORT_FMT)
        super().__init__(final_fmt, datefmt=datefmt)
        self.show_logger = show_logger
