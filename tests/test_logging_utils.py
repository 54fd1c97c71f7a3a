from __future__ import annotations

import logging

import pytest

from drink_agent.logging_utils import NOISY_LOGGERS, configure_logging


@pytest.fixture()
def root_level():
    root = logging.getLogger()
    saved = root.level
    saved_levels = [h.level for h in root.handlers]
    saved_noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield root
    root.setLevel(saved)
    for h, level in zip(root.handlers, saved_levels):
        h.setLevel(level)
    for name, level in saved_noisy.items():
        logging.getLogger(name).setLevel(level)


def test_verbose_means_debug(root_level):
    assert configure_logging(1, "ERROR") == logging.DEBUG
    assert root_level.level == logging.DEBUG


def test_single_verbose_keeps_library_loggers_at_info(root_level):
    configure_logging(1)
    assert logging.getLogger("httpx").level == logging.INFO
    configure_logging(2)
    assert logging.getLogger("httpx").level == logging.DEBUG


def test_level_name_applies_without_verbose(root_level):
    configure_logging(0, "info")
    assert root_level.level == logging.INFO


def test_env_level_used_when_settings_level_missing(root_level, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert configure_logging(0) == logging.ERROR


def test_unknown_level_name_falls_back(root_level, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert configure_logging(0, "basicConfig") == logging.WARNING
    assert root_level.level == logging.WARNING
