"""
Tests for the root logging setup.
"""

import logging

import pytest

from mixtape.logging_config import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_level_and_file_come_from_env(root_logger, tmp_path, monkeypatch):
    log_file = tmp_path / "logs" / "mixtape.log"
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    setup_logging()
    logging.getLogger("mixtape.test").debug("hello from the test")
    for handler in root_logger.handlers:
        handler.flush()

    assert root_logger.level == logging.DEBUG
    assert "hello from the test" in log_file.read_text()


def test_explicit_arguments_win_over_env(root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("LOG_FILE", raising=False)

    setup_logging("warning")

    assert root_logger.level == logging.WARNING
    assert len(root_logger.handlers) == 1


def test_unknown_level_falls_back_to_info(root_logger):
    setup_logging("chatty")

    assert root_logger.level == logging.INFO


def test_noisy_libraries_are_quieted(root_logger):
    setup_logging("DEBUG")

    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("spotipy").level == logging.WARNING
