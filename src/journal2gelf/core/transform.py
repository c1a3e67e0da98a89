"""Turn one journald-style JSON record into a compressed GELF payload."""

from __future__ import annotations

import json
import re
from typing import Any, Dict

from ..config.schema import WatchedConfig
from ..gelf.levels import MessageLevel, SystemLevel
from ..gelf.message import Message
from ..gelf.wire import WireMessage
from ..utils.time import micros_to_seconds
from .errors import InsufficientLogLevel, NoMessage, ParsingFailure

__all__ = [
    "IGNORED_FIELDS",
    "UNDEFINED_HOST",
    "parse_record",
    "message_level",
    "build_message",
    "transform_record",
]

IGNORED_FIELDS = frozenset(
    {
        "MESSAGE",
        "_HOSTNAME",
        "__REALTIME_TIMESTAMP",
        "PRIORITY",
        "__CURSOR",
        "_BOOT_ID",
        "_MACHINE_ID",
        "_SYSTEMD_CGROUP",
        "_SYSTEMD_SLICE",
    }
)

UNDEFINED_HOST = "undefined"

# First ``level=<word>`` in the message text; the word is looked up leniently.
_MSG_LEVEL_RE = re.compile(r"level=([a-z]+)", re.IGNORECASE)

LogRecord = Dict[str, Any]


def _reject_constant(name: str) -> Any:
    raise ParsingFailure(f"[JSON parsing] non-standard constant {name}")


def parse_record(raw_line: str) -> LogRecord:
    try:
        decoded = json.loads(raw_line, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise ParsingFailure(f"[JSON parsing] {exc}") from exc
    if not isinstance(decoded, dict):
        raise ParsingFailure(f"[JSON parsing] expected an object, got {type(decoded).__name__}")
    return decoded


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    # journald exports non UTF-8 fields as arrays of byte values
    if isinstance(value, list) and all(isinstance(b, int) and 0 <= b < 256 for b in value):
        return bytes(value).decode("utf-8", errors="replace")
    return json.dumps(value, ensure_ascii=False)


def _unsigned(value: Any, limit: int | None = None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        return None
    if number < 0 or (limit is not None and number > limit):
        return None
    return number


def message_level(text: str) -> MessageLevel | None:
    match = _MSG_LEVEL_RE.search(text)
    if match is None:
        return None
    return MessageLevel.from_word(match.group(1))


def build_message(record: LogRecord, config: WatchedConfig) -> Message:
    """Build a :class:`Message` from ``record`` applying the level thresholds."""

    if "MESSAGE" not in record:
        raise NoMessage()
    short_message = _text(record["MESSAGE"])

    host_raw = record.get("_HOSTNAME")
    host = _text(host_raw) if host_raw is not None else UNDEFINED_HOST

    if config.log_level_message is not None:
        level = message_level(short_message)
        if level is not None and level.is_less_severe_than(config.log_level_message):
            raise InsufficientLogLevel()

    msg = Message(host, short_message)

    priority = _unsigned(record.get("PRIORITY"), limit=255)
    if priority is not None:
        system_level = SystemLevel.from_num(priority)
        if system_level.is_less_severe_than(config.log_level_system):
            raise InsufficientLogLevel()
        msg.set_level(system_level)

    micros = _unsigned(record.get("__REALTIME_TIMESTAMP"))
    if micros is not None:
        msg.set_timestamp(micros_to_seconds(micros))

    for key, value in record.items():
        if key not in IGNORED_FIELDS:
            msg.set_metadata(key, value)

    return msg


def transform_record(raw_line: str, config: WatchedConfig) -> bytes:
    """Decode ``raw_line``, build the GELF message, serialize and compress it."""

    msg = build_message(parse_record(raw_line), config)
    wire = WireMessage(msg, team=config.team, service=config.service)
    return config.compression.compress(wire)
