from __future__ import annotations

import logging
import os
import socket
from typing import Iterator

import pytest

import journal2gelf.api as journal2gelf_api
from journal2gelf.config.schema import Config, GlobalConfig, WatchedConfig


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    package_logger = logging.getLogger("journal2gelf")
    if journal2gelf_api._HANDLER is not None:
        package_logger.removeHandler(journal2gelf_api._HANDLER)
        journal2gelf_api._HANDLER.close()
        journal2gelf_api._HANDLER = None
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    for key in list(os.environ):
        if key.startswith("JOURNAL2GELF__"):
            monkeypatch.delenv(key)
    user_dir = tmp_path_factory.mktemp("user-config")
    monkeypatch.setattr("journal2gelf.config.loader.user_config_dir", lambda _: str(user_dir))
    monkeypatch.chdir(tmp_path_factory.mktemp("workdir"))


@pytest.fixture
def receiver() -> Iterator[socket.socket]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    try:
        yield sock
    finally:
        sock.close()


@pytest.fixture
def make_config():
    def factory(**watched: object) -> Config:
        return Config(
            global_config=GlobalConfig(sender_port=0),
            watched=WatchedConfig(**watched),  # type: ignore[arg-type]
        )

    return factory
