"""In-flight GELF message model."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping

from .levels import SystemLevel

__all__ = ["Message", "RESERVED_METADATA_KEYS"]

# GELF reserves ``_id``; metadata keys are prefixed with ``_`` on the wire.
RESERVED_METADATA_KEYS = frozenset({"id"})


class Message:
    """One log event built up by the record transformer.

    Every field except ``host`` and ``short_message`` is optional. ``level``
    defaults to ``ALERT`` as the GELF specification requires, and a missing
    ``timestamp`` is filled in when the message is encoded.
    """

    __slots__ = ("host", "_short_message", "_full_message", "_timestamp", "_level", "_metadata")

    def __init__(self, host: str, short_message: str) -> None:
        self.host = host
        self._short_message = short_message
        self._full_message: str | None = None
        self._timestamp: float | None = None
        self._level = SystemLevel.ALERT
        self._metadata: Dict[str, Any] = {}

    @property
    def short_message(self) -> str:
        return self._short_message

    def set_short_message(self, text: str) -> "Message":
        self._short_message = text
        return self

    @property
    def full_message(self) -> str | None:
        return self._full_message

    def set_full_message(self, text: str) -> "Message":
        self._full_message = text
        return self

    def clear_full_message(self) -> "Message":
        self._full_message = None
        return self

    @property
    def timestamp(self) -> float | None:
        return self._timestamp

    def set_timestamp(self, ts: float) -> "Message":
        self._timestamp = float(ts)
        return self

    def clear_timestamp(self) -> "Message":
        self._timestamp = None
        return self

    @property
    def level(self) -> SystemLevel:
        return self._level

    def set_level(self, level: SystemLevel) -> "Message":
        self._level = level
        return self

    @property
    def metadata(self) -> Mapping[str, Any]:
        return MappingProxyType(self._metadata)

    def get_metadata(self, key: str) -> Any:
        return self._metadata.get(key)

    def set_metadata(self, key: str, value: Any) -> bool:
        """Store an additional field; returns ``False`` if ``key`` is reserved."""

        if key in RESERVED_METADATA_KEYS:
            return False
        self._metadata[key] = value
        return True

    def __repr__(self) -> str:
        return (
            f"Message(host={self.host!r}, short_message={self._short_message!r}, "
            f"level={self._level.name}, metadata={len(self._metadata)} fields)"
        )
