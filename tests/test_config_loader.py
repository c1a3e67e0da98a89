from __future__ import annotations

from pathlib import Path

import pytest

from journal2gelf.config import loader
from journal2gelf.config.schema import LogSource, parse_address
from journal2gelf.core.errors import ConfigurationError
from journal2gelf.gelf.compression import MessageCompression
from journal2gelf.gelf.levels import MessageLevel, SystemLevel

TOML = """\
graylog_addr = "graylog.local:12201"
compression = "zlib"
team = "infra"
log_level_system = "warning"
log_level_message = "error"

[global]
log_source = "journal"
sender_port = 5001
"""


def test_defaults_without_file() -> None:
    config = loader.load_configuration(None)
    assert config.global_config.log_source is LogSource.STDIN
    assert config.global_config.sender_port == 5000
    assert config.watched.graylog_addr == "localhost:12201"
    assert config.watched.compression is MessageCompression.GZIP
    assert config.watched.log_level_system is SystemLevel.INFORMATIONAL
    assert config.watched.log_level_message is None
    assert config.watched.team is None


def test_load_toml(tmp_path: Path) -> None:
    path = tmp_path / "journal2gelf.toml"
    path.write_text(TOML)

    config = loader.load_configuration(path)

    assert config.global_config.log_source is LogSource.JOURNAL
    assert config.global_config.sender_port == 5001
    assert config.watched.target == ("graylog.local", 12201)
    assert config.watched.compression is MessageCompression.ZLIB
    assert config.watched.team == "infra"
    assert config.watched.service is None
    assert config.watched.log_level_system is SystemLevel.WARNING
    assert config.watched.log_level_message is MessageLevel.ERROR


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "journal2gelf.yaml"
    path.write_text("graylog_addr: '10.0.0.5:12201'\ncompression: none\nglobal:\n  sender_port: 0\n")

    config = loader.load_configuration(path)

    assert config.watched.target == ("10.0.0.5", 12201)
    assert config.watched.compression is MessageCompression.NONE
    assert config.global_config.sender_port == 0


def test_configuration_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "journal2gelf.toml"
    path.write_text(TOML)
    monkeypatch.setenv("JOURNAL2GELF__TEAM", "  platform  ")
    monkeypatch.setenv("JOURNAL2GELF__GLOBAL__SENDER_PORT", "6000")

    config = loader.load_configuration(path, {"team": "override"})
    assert config.watched.team == "override"
    assert config.global_config.sender_port == 6000

    config = loader.load_configuration(path)
    assert config.watched.team == "platform"


def test_find_config_file_prefers_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "journal2gelf.yaml").write_text("team: user\n")
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)

    assert loader.find_config_file() == user_dir / "journal2gelf.yaml"

    (project / "journal2gelf.toml").write_text('team = "local"\n')
    assert loader.find_config_file() == project / "journal2gelf.toml"


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        loader.load_configuration(tmp_path / "absent.toml")


@pytest.mark.parametrize(
    "content",
    [
        'compression = "brotli"\n',
        'log_level_system = "loud"\n',
        'log_level_message = "trace"\n',
        'graylog_addr = "no-port"\n',
        'graylog_addr = "host:99999"\n',
        '[global]\nlog_source = "kafka"\n',
        "[global]\nsender_port = 70000\n",
        'team = "' + "x" * 2049 + '"\n',
        "graylog_addr = [unterminated\n",
    ],
)
def test_invalid_configuration(tmp_path: Path, content: str) -> None:
    path = tmp_path / "journal2gelf.toml"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        loader.load_configuration(path)


def test_load_watched_ignores_global_section(tmp_path: Path) -> None:
    path = tmp_path / "journal2gelf.toml"
    path.write_text('compression = "none"\n[global]\nlog_source = "kafka"\n')
    assert loader.load_watched(path).compression is MessageCompression.NONE


def test_parse_address_variants() -> None:
    assert parse_address("graylog:12201") == ("graylog", 12201)
    assert parse_address("[::1]:12201") == ("::1", 12201)
    with pytest.raises(ValueError):
        parse_address(":12201")


@pytest.mark.parametrize("name", ["journal2gelf.toml", "journal2gelf.yaml"])
def test_non_utf8_file_is_a_configuration_error(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_bytes(b'team = "\xff\xfe"\n' if name.endswith(".toml") else b'team: "\xff\xfe"\n')
    with pytest.raises(ConfigurationError, match="cannot parse"):
        loader.load_configuration(path)
