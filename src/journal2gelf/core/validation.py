"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import Config, WatchedConfig, parse_address
from .errors import ConfigurationError

__all__ = ["MAX_NAME_LEN", "validate_configuration", "validate_watched"]

# Longest accepted team or service name, in UTF-8 bytes.
MAX_NAME_LEN = 2048


def validate_watched(watched: WatchedConfig) -> None:
    """Ensure the hot-reloadable settings are usable by the sender."""

    try:
        parse_address(watched.graylog_addr)
    except ValueError as exc:
        raise ConfigurationError(f"bad graylog_addr: {exc}") from exc

    for name in ("team", "service"):
        value = getattr(watched, name)
        if value is not None and len(value.encode("utf-8")) > MAX_NAME_LEN:
            raise ConfigurationError(f"Provided {name} name is too long (max {MAX_NAME_LEN} bytes)")


def validate_configuration(config: Config) -> None:
    port = config.global_config.sender_port
    if not 0 <= port <= 65535:
        raise ConfigurationError(f"sender_port out of range: {port}")
    validate_watched(config.watched)
