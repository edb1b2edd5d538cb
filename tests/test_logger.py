"""
Tests for the package logger.
"""

import importlib
import logging

import pytest

from wolfram_knowledge.utils import logger as logger_module


@pytest.fixture
def reload_logger(monkeypatch):
    yield lambda: importlib.reload(logger_module)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    importlib.reload(logger_module)


def test_level_from_environment(monkeypatch, reload_logger):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    module = reload_logger()

    assert module.LOG_LEVEL == "DEBUG"
    assert module.logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch, reload_logger):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    module = reload_logger()

    assert module.LOG_LEVEL == "INFO"
    assert module.logger.level == logging.INFO


def test_child_loggers():
    assert logger_module.get_logger("wolfram_knowledge.services").name == "wolfram_knowledge.services"
    assert logger_module.get_logger("retry").name == "wolfram_knowledge.retry"
    assert logger_module.get_logger() is logger_module.logger
