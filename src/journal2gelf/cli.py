"""Command line entry point."""

from __future__ import annotations

import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Dict

import click

from .api import configure_logging, serve
from .core.errors import ConfigurationError, Journal2GelfError
from .version import __version__

__all__ = ["main", "build_overrides"]

logger = logging.getLogger(__name__)

SYSTEM_LEVELS = ["emergency", "alert", "critical", "error", "warning", "notice", "informational", "debug"]
MESSAGE_LEVELS = ["fatal", "panic", "error", "warning", "info", "debug"]


def build_overrides(
    *,
    source: str | None = None,
    port: int | None = None,
    target: str | None = None,
    compression: str | None = None,
    team: str | None = None,
    service: str | None = None,
    system_level: str | None = None,
    message_level: str | None = None,
) -> Dict[str, Any]:
    """Turn the options the user actually passed into a configuration mapping."""

    overrides: Dict[str, Any] = {}
    global_part: Dict[str, Any] = {}
    if source is not None:
        global_part["log_source"] = source
    if port is not None:
        global_part["sender_port"] = port
    if global_part:
        overrides["global"] = global_part
    for key, value in (
        ("graylog_addr", target),
        ("compression", compression),
        ("team", team),
        ("service", service),
        ("log_level_system", system_level),
        ("log_level_message", message_level),
    ):
        if value is not None:
            overrides[key] = value
    return overrides


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to load and watch for changes.",
)
@click.option("-s", "--source", type=click.Choice(["stdin", "journal"]), help="Log source.")
@click.option("-p", "--port", type=click.IntRange(0, 65535), help="Local UDP port to send from.")
@click.option("-t", "--target", metavar="HOST:PORT", help="Address of the Graylog GELF UDP input.")
@click.option("-c", "--comp", "compression", type=click.Choice(["none", "gzip", "zlib"]), help="Message compression.")
@click.option("--team", help="Optional team name added to every message.")
@click.option("--service", help="Optional service name added to every message.")
@click.option("-l", "--sys", "system_level", type=click.Choice(SYSTEM_LEVELS), help="System log level threshold.")
@click.option("-m", "--msg", "message_level", type=click.Choice(MESSAGE_LEVELS), help="Message log level threshold.")
@click.option(
    "--debounce",
    type=click.FloatRange(min=0.0),
    default=2.0,
    show_default=True,
    help="Seconds a config change must settle before it is reloaded.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug output.")
@click.version_option(__version__, prog_name="journal2gelf")
def main(
    config_path: Path | None,
    source: str | None,
    port: int | None,
    target: str | None,
    compression: str | None,
    team: str | None,
    service: str | None,
    system_level: str | None,
    message_level: str | None,
    debounce: float,
    verbose: bool,
) -> None:
    """Read logs from stdin or journalctl and send them to Graylog as GELF over UDP.

    Command line options override the configuration file and stay fixed
    across hot reloads.
    """

    configure_logging(logging.DEBUG if verbose else logging.INFO)
    overrides = build_overrides(
        source=source,
        port=port,
        target=target,
        compression=compression,
        team=team,
        service=service,
        system_level=system_level,
        message_level=message_level,
    )

    stop_event = threading.Event()

    def shutdown(signum: int, frame: Any) -> None:
        logger.info("shutting down...")
        stop_event.set()
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stats = serve(config_path, overrides, stop_event=stop_event, debounce_s=debounce)
    except KeyboardInterrupt:
        return
    except ConfigurationError as exc:
        logger.error("configuration error: %s", exc)
        sys.exit(1)
    except Journal2GelfError:
        # already reported by serve with the configured source name
        sys.exit(1)

    logger.info(
        "input finished: %d lines, %d sent, %d filtered, %d failed",
        stats.lines,
        stats.accepted,
        stats.filtered,
        stats.failed,
    )
