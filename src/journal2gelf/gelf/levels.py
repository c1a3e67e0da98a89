"""Severity levels used on the wire and for message filtering."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["SystemLevel", "MessageLevel"]


class SystemLevel(IntEnum):
    """Syslog severity (RFC 5424), which GELF reuses for its ``level`` field.

    Lower values are more severe. Codes above 7 are clamped to ``DEBUG``.
    """

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7

    @classmethod
    def from_num(cls, level: int) -> "SystemLevel":
        if level < 0:
            raise ValueError(f"negative syslog priority: {level}")
        if level > cls.DEBUG:
            return cls.DEBUG
        return cls(level)

    @classmethod
    def from_name(cls, name: str) -> "SystemLevel":
        """Resolve a level from a configuration name such as ``"warning"``."""

        normalized = name.strip().lower()
        if normalized == "info":
            return cls.INFORMATIONAL
        try:
            return cls[normalized.upper()]
        except KeyError:
            raise ValueError(f"unknown system log level: {name!r}") from None

    def is_less_severe_than(self, threshold: "SystemLevel") -> bool:
        return self > threshold

    def __str__(self) -> str:
        if self is SystemLevel.INFORMATIONAL:
            return "info"
        return self.name.lower()


class MessageLevel(IntEnum):
    """Application level found inside free-text log lines (``level=error``)."""

    FATAL = 0
    PANIC = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5

    @classmethod
    def from_word(cls, word: str) -> "MessageLevel":
        """Lax mapping used on log content; unknown words become ``DEBUG``."""

        try:
            return cls[word.strip().upper()]
        except KeyError:
            return cls.DEBUG

    @classmethod
    def from_name(cls, name: str) -> "MessageLevel":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown message log level: {name!r}") from None

    def is_less_severe_than(self, threshold: "MessageLevel") -> bool:
        return self > threshold

    def __str__(self) -> str:
        return self.name.lower()
