"""Log level resolution."""

import logging

import pytest

from utils.logging_setup import _parse_level


@pytest.fixture(autouse=True)
def no_env_level(monkeypatch):
    monkeypatch.delenv("TALLY_LOG_LEVEL", raising=False)


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("TALLY_LOG_LEVEL", "ERROR")
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level(15) == 15
    assert _parse_level("25") == 25


def test_env_level_used_when_argument_missing_or_unknown(monkeypatch):
    monkeypatch.setenv("TALLY_LOG_LEVEL", "warning")
    assert _parse_level(None) == logging.WARNING
    assert _parse_level("loud") == logging.WARNING


@pytest.mark.parametrize("env_value", ["verbose", "Trace", "  ", "BASIC_FORMAT"])
def test_unknown_env_level_falls_back_to_info(monkeypatch, env_value):
    monkeypatch.setenv("TALLY_LOG_LEVEL", env_value)
    assert _parse_level(None) == logging.INFO
    assert _parse_level("nonsense") == logging.INFO


def test_defaults_to_info():
    assert _parse_level(None) == logging.INFO
