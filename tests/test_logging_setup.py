"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler

from askprofiles.logging_setup import resolve_level, setup_logging


def test_setup_is_idempotent_and_writes_under_state_dir(isolated_xdg, monkeypatch) -> None:
    monkeypatch.setenv("ASKPROFILES_LOG_LEVEL", "debug")
    setup_logging()
    logger = setup_logging()
    assert logger.name == "askprofiles"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    files = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert files[0].baseFilename == str(isolated_xdg / "state" / "askprofiles" / "profiles.log")


def test_unknown_level_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("ASKPROFILES_LOG_LEVEL", "chatty")
    assert setup_logging().level == logging.INFO


def test_non_level_attribute_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("ASKPROFILES_LOG_LEVEL", "BASIC_FORMAT")
    assert resolve_level() == ("INFO", logging.INFO)
    assert setup_logging().level == logging.INFO


def test_explicit_level_beats_environment(monkeypatch) -> None:
    monkeypatch.setenv("ASKPROFILES_LOG_LEVEL", "ERROR")
    assert resolve_level("warning") == ("WARNING", logging.WARNING)
    assert setup_logging("debug").level == logging.DEBUG
