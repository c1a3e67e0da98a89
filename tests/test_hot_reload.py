from __future__ import annotations

import io
import logging
import os
import threading
from pathlib import Path

import pytest

from journal2gelf.api import serve
from journal2gelf.config.loader import load_configuration, load_watched
from journal2gelf.config.schema import WatchedConfig
from journal2gelf.config.shared import SharedConfig, merge_watched
from journal2gelf.config.watcher import ConfigWatcher
from journal2gelf.core.sources import StreamSource
from journal2gelf.gelf.compression import MessageCompression
from journal2gelf.gelf.levels import SystemLevel


def _write(path: Path, text: str, mtime: int) -> None:
    path.write_text(text)
    os.utime(path, ns=(mtime * 1_000_000_000, mtime * 1_000_000_000))


def _watcher(path: Path, shared: SharedConfig, debounce_s: float = 2.0) -> ConfigWatcher:
    return ConfigWatcher(path, shared, load_watched, debounce_s=debounce_s, poll_interval_s=0.01)


def test_take_change_is_non_blocking_and_one_shot(make_config) -> None:
    shared = SharedConfig(make_config())
    assert shared.take_change() is None

    shared.replace_watched(WatchedConfig(compression=MessageCompression.ZLIB))
    assert shared.changed
    first = shared.take_change()
    assert first is not None and first.compression is MessageCompression.ZLIB
    assert shared.take_change() is None
    assert not shared.changed


def test_snapshot_is_a_private_copy(make_config) -> None:
    shared = SharedConfig(make_config(team="a"))
    snapshot = shared.snapshot()
    snapshot.watched.team = "b"
    assert shared.snapshot().watched.team == "a"


def test_merge_watched_copies_only_differences(caplog: pytest.LogCaptureFixture) -> None:
    current = WatchedConfig(compression=MessageCompression.NONE, team="infra")
    incoming = WatchedConfig(compression=MessageCompression.GZIP, team="infra", service="api")

    with caplog.at_level(logging.INFO, logger="journal2gelf.config.shared"):
        changed = merge_watched(current, incoming)

    assert changed == ["compression", "service"]
    assert current.compression is MessageCompression.GZIP
    assert current.service == "api"
    assert "compression: none -> gzip" in caplog.text
    assert "service: unset -> api" in caplog.text
    assert "team" not in caplog.text


def test_watcher_debounces_writes(tmp_path: Path) -> None:
    path = tmp_path / "journal2gelf.toml"
    _write(path, 'compression = "none"\n', 1_000)
    shared = SharedConfig(load_configuration(path))
    watcher = _watcher(path, shared, debounce_s=2.0)

    assert watcher.poll_once(now=0.0) is False

    _write(path, 'compression = "gzip"\n', 1_001)
    assert watcher.poll_once(now=10.0) is False
    # another write inside the window restarts it
    _write(path, 'compression = "zlib"\n', 1_002)
    assert watcher.poll_once(now=11.0) is False
    assert watcher.poll_once(now=12.5) is False
    assert not shared.changed

    assert watcher.poll_once(now=13.0) is True
    change = shared.take_change()
    assert change is not None and change.compression is MessageCompression.ZLIB
    assert watcher.poll_once(now=20.0) is False


def test_watcher_keeps_last_good_config_on_parse_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "journal2gelf.toml"
    _write(path, 'log_level_system = "error"\n', 1_000)
    shared = SharedConfig(load_configuration(path))
    watcher = _watcher(path, shared, debounce_s=0.0)

    _write(path, 'log_level_system = "very-loud"\n', 1_001)
    with caplog.at_level(logging.ERROR, logger="journal2gelf.config.watcher"):
        watcher.poll_once(now=1.0)
        assert watcher.poll_once(now=2.0) is False

    assert "failed" in caplog.text
    assert not shared.changed
    assert shared.snapshot().watched.log_level_system is SystemLevel.ERROR
    # the broken revision is not retried
    assert watcher.poll_once(now=3.0) is False

    _write(path, 'log_level_system = "debug"\n', 1_002)
    watcher.poll_once(now=4.0)
    assert watcher.poll_once(now=5.0) is True
    assert shared.snapshot().watched.log_level_system is SystemLevel.DEBUG


def test_watcher_survives_removal(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "journal2gelf.toml"
    _write(path, 'team = "one"\n', 1_000)
    shared = SharedConfig(load_configuration(path))
    watcher = _watcher(path, shared, debounce_s=0.0)

    path.unlink()
    with caplog.at_level(logging.WARNING, logger="journal2gelf.config.watcher"):
        assert watcher.poll_once(now=1.0) is False
        assert watcher.poll_once(now=2.0) is False
    assert caplog.text.count("removed or moved") == 1
    assert shared.snapshot().watched.team == "one"

    _write(path, 'team = "one"\n', 1_000)
    watcher.poll_once(now=3.0)
    assert watcher.poll_once(now=4.0) is True
    assert shared.take_change() is not None


def test_watcher_thread_stops_on_event(tmp_path: Path) -> None:
    path = tmp_path / "journal2gelf.toml"
    _write(path, 'team = "one"\n', 1_000)
    shared = SharedConfig(load_configuration(path))
    watcher = _watcher(path, shared, debounce_s=0.0)
    stop = threading.Event()

    thread = watcher.start(stop)
    _write(path, 'team = "two"\n', 1_005)
    for _ in range(200):
        if shared.changed:
            break
        stop.wait(0.01)
    stop.set()
    thread.join(timeout=2.0)

    assert not thread.is_alive()
    assert shared.snapshot().watched.team == "two"


def test_serve_joins_the_watcher_thread(tmp_path: Path, receiver) -> None:
    host, port = receiver.getsockname()
    path = tmp_path / "journal2gelf.toml"
    path.write_text(f'graylog_addr = "{host}:{port}"\ncompression = "none"\n[global]\nsender_port = 0\n')

    stats = serve(path, source=StreamSource(io.StringIO('{"MESSAGE": "one"}\n')))

    assert stats.accepted == 1
    assert not [t for t in threading.enumerate() if t.name == "journal2gelf-config-watcher"]
