"""Configuration schema definition for journal2gelf."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from ..core.errors import ConfigurationError
from ..gelf.compression import MessageCompression
from ..gelf.levels import MessageLevel, SystemLevel

__all__ = [
    "DEFAULT_CONFIG",
    "WATCHED_KEYS",
    "LogSource",
    "GlobalConfig",
    "WatchedConfig",
    "Config",
    "default_config",
    "parse_address",
    "build_config",
    "build_watched",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "global": {
        "log_source": "stdin",
        "sender_port": 5000,
    },
    "graylog_addr": "localhost:12201",
    "compression": "gzip",
    "team": None,
    "service": None,
    "log_level_system": "informational",
    "log_level_message": None,
}

WATCHED_KEYS = (
    "graylog_addr",
    "compression",
    "team",
    "service",
    "log_level_system",
    "log_level_message",
)


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


class LogSource(str, Enum):
    STDIN = "stdin"
    JOURNAL = "journal"

    def __str__(self) -> str:
        return self.value


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6addr]:port``) into a ``sendto`` target."""

    host, sep, port_str = address.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"address must look like host:port, got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"invalid port in address {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in address {address!r}")
    return host, port


@dataclass(frozen=True, slots=True)
class GlobalConfig:
    """Settings fixed for the lifetime of the process."""

    log_source: LogSource = LogSource.STDIN
    sender_port: int = 5000


@dataclass(slots=True)
class WatchedConfig:
    """Settings that may be hot-reloaded while the ingestion loop runs."""

    graylog_addr: str = "localhost:12201"
    compression: MessageCompression = MessageCompression.GZIP
    team: str | None = None
    service: str | None = None
    log_level_system: SystemLevel = SystemLevel.INFORMATIONAL
    log_level_message: MessageLevel | None = None

    @property
    def target(self) -> Tuple[str, int]:
        return parse_address(self.graylog_addr)

    def copy(self) -> "WatchedConfig":
        return replace(self)


@dataclass(slots=True)
class Config:
    global_config: GlobalConfig
    watched: WatchedConfig
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def copy(self) -> "Config":
        return Config(global_config=self.global_config, watched=self.watched.copy(), raw=self.raw)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _to_global(data: Mapping[str, Any]) -> GlobalConfig:
    source_raw = str(data.get("log_source", "stdin")).strip().lower()
    try:
        log_source = LogSource(source_raw)
    except ValueError:
        raise ConfigurationError(f"unknown log source: {source_raw!r} (expected stdin or journal)") from None
    try:
        sender_port = int(data.get("sender_port", 5000))
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid sender port: {data.get('sender_port')!r}") from None
    return GlobalConfig(log_source=log_source, sender_port=sender_port)


def build_watched(data: Mapping[str, Any]) -> WatchedConfig:
    """Build the hot-reloadable part of the configuration."""

    try:
        compression = MessageCompression.from_name(str(data.get("compression", "gzip")))
        log_level_system = SystemLevel.from_name(str(data.get("log_level_system", "informational")))
        msg_level_raw = data.get("log_level_message")
        log_level_message = (
            MessageLevel.from_name(str(msg_level_raw)) if msg_level_raw not in (None, "") else None
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    return WatchedConfig(
        graylog_addr=str(data.get("graylog_addr", "localhost:12201")).strip(),
        compression=compression,
        team=_optional_text(data.get("team")),
        service=_optional_text(data.get("service")),
        log_level_system=log_level_system,
        log_level_message=log_level_message,
    )


def build_config(data: Mapping[str, Any]) -> Config:
    global_data = data.get("global", {})
    if not isinstance(global_data, Mapping):
        raise ConfigurationError("'global' must be a table")
    raw_copy: Dict[str, Any] = deepcopy({k: v for k, v in data.items()})
    return Config(
        global_config=_to_global(global_data),
        watched=build_watched(data),
        raw=raw_copy,
    )
