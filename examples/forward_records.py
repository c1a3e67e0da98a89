"""Send a few journald-style records to a local Graylog GELF UDP input."""

from __future__ import annotations

import io
import json
import logging

from journal2gelf import configure_logging
from journal2gelf.config.loader import load_configuration
from journal2gelf.config.shared import SharedConfig
from journal2gelf.core.ingest import IngestionLoop
from journal2gelf.core.sources import StreamSource


def main() -> None:
    configure_logging(logging.DEBUG)
    config = load_configuration(
        None,
        {"graylog_addr": "localhost:12201", "compression": "gzip", "team": "demo", "global": {"sender_port": 0}},
    )
    records = [
        {"MESSAGE": "level=info service started", "_HOSTNAME": "demo-host", "PRIORITY": "6"},
        {"MESSAGE": "level=error disk full", "_HOSTNAME": "demo-host", "PRIORITY": "3", "_SYSTEMD_UNIT": "demo.service"},
    ]
    lines = io.StringIO("".join(json.dumps(record) + "\n" for record in records))

    loop = IngestionLoop(SharedConfig(config))
    try:
        stats = loop.run(StreamSource(lines))
    finally:
        loop.close()
    print(f"sent {stats.datagrams} datagrams for {stats.accepted} records")


if __name__ == "__main__":
    main()
