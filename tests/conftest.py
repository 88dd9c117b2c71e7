"""Shared fixtures: isolate every test from the user's environment."""

import logging

import pytest

from highlite.highlight import LineHighlighter, compile_rules
from highlite.utils.log import ROOT_LOGGER


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Point config lookups at an empty directory and clear HIGHLITE_* vars."""
    for key in (
        "HIGHLITE_CONFIG",
        "HIGHLITE_PRESET",
        "HIGHLITE_COLOR",
        "HIGHLITE_POLL_INTERVAL",
        "HIGHLITE_LOG_LEVEL",
        "XDG_CONFIG_HOME",
    ):
        monkeypatch.delenv(key, raising=False)
    config_dir = tmp_path / "highlite-config"
    monkeypatch.setenv("HIGHLITE_CONFIG_DIR", str(config_dir))
    yield config_dir
    _reset_highlite_logger()


def _reset_highlite_logger():
    """Undo configure_logging() so caplog sees records in the next test."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_highlighter():
    """Build a LineHighlighter straight from a rule list."""
    def _make(rules, force_ignore_case=False):
        return LineHighlighter(compile_rules(rules, force_ignore_case=force_ignore_case))
    return _make
