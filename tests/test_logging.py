from __future__ import annotations

import logging

from rich.logging import RichHandler

from kvlock.utils.logging import get_logger


def test_logger_is_namespaced_and_uses_rich():
    logger = get_logger("NamespaceCheck")
    assert logger.name == "kvlock.NamespaceCheck"
    assert isinstance(logger.handlers[0], RichHandler)
    assert get_logger("NamespaceCheck") is logger
    assert len(logger.handlers) == 1


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("KVLOCK_LOG_LEVEL", "debug")
    assert get_logger("EnvLevelCheck").level == logging.DEBUG

    monkeypatch.setenv("KVLOCK_LOG_LEVEL", "nonsense")
    assert get_logger("BadLevelCheck").level == logging.INFO


def test_plain_handler_when_rich_disabled():
    logger = get_logger("PlainCheck", logging.WARNING, rich=False)
    assert type(logger.handlers[0]) is logging.StreamHandler
    assert logger.level == logging.WARNING
