"""Shared pytest fixtures"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_fastleng_logger():
    """Drop handlers installed by setup_logging() so they don't outlive a test"""
    yield
    logger = logging.getLogger("fastleng")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's config file and FASTLENG_* variables out of tests"""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("FASTLENG_LOG_TO_FILE", raising=False)
    for key in ("FASTLENG_LOADING_PROGRESS_INTERVAL", "FASTLENG_REPORT_N_SCORES",
                "FASTLENG_REPORT_INDENT", "FASTLENG_PLOT_BINS", "FASTLENG_PLOT_LOG_SCALE"):
        monkeypatch.delenv(key, raising=False)
