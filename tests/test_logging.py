"""Tests for logging setup."""

import logging

import pytest

from coinfacade.logging import LOG_FILE, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("COINFACADE_LOG_LEVEL", "debug")
    assert configure_logging() == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("COINFACADE_LOG_LEVEL", "DEBUG")
    assert configure_logging(level="error") == logging.ERROR


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.delenv("COINFACADE_LOG_LEVEL", raising=False)
    assert configure_logging(level="chatty") == logging.INFO


def test_file_handler_writes_to_log_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("COINFACADE_LOG_LEVEL", raising=False)
    log_dir = tmp_path / "logs"

    configure_logging(log_dir)
    logging.getLogger("coinfacade.test").info("order placed")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "order placed" in (log_dir / LOG_FILE).read_text(encoding="utf-8")


def test_aiohttp_access_log_is_quiet(monkeypatch):
    monkeypatch.delenv("COINFACADE_LOG_LEVEL", raising=False)
    configure_logging()
    assert logging.getLogger("aiohttp.access").level == logging.WARNING
