"""Tests for CLI logging setup."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from hukukrag.log import setup_logging


@pytest.fixture
def hukukrag_logger():
    logger = logging.getLogger("hukukrag")
    saved_level, saved_handlers = logger.level, list(logger.handlers)
    logger.handlers = [h for h in logger.handlers if not isinstance(h, RichHandler)]
    yield logger
    logger.setLevel(saved_level)
    logger.handlers = saved_handlers


def test_explicit_level(hukukrag_logger):
    setup_logging("debug")
    assert hukukrag_logger.level == logging.DEBUG


def test_level_from_env(hukukrag_logger, monkeypatch):
    monkeypatch.setenv("HUKUKRAG_LOG_LEVEL", "INFO")
    setup_logging()
    assert hukukrag_logger.level == logging.INFO


def test_default_and_unknown_level(hukukrag_logger, monkeypatch):
    monkeypatch.delenv("HUKUKRAG_LOG_LEVEL", raising=False)
    setup_logging()
    assert hukukrag_logger.level == logging.WARNING
    setup_logging("gürültülü")
    assert hukukrag_logger.level == logging.WARNING


def test_handler_installed_once(hukukrag_logger):
    setup_logging("INFO")
    setup_logging("ERROR")
    rich_handlers = [h for h in hukukrag_logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert hukukrag_logger.level == logging.ERROR
