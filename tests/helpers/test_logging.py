"""Tests for logging configuration."""

import pytest

import logging
import sys

import colorlog

from src.helpers.logging import LOG_FORMAT, get_logger


class TestGetLogger:
    """Tests for get_logger function."""

    def test_module_logger_is_cached(self) -> None:
        """Test that repeated lookups share one logger and one handler."""
        logger = get_logger("src.indexer.cached")
        again = get_logger("src.indexer.cached", log_level="ERROR")

        assert again is logger
        assert len(logger.handlers) == 1

    def test_explicit_level(self) -> None:
        logger = get_logger("src.indexer.explicit", log_level="debug")

        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG

    def test_default_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logger = get_logger("src.indexer.default")

        assert logger.level == logging.INFO

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that LOG_LEVEL applies to module loggers created at import."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        logger = get_logger("src.indexer.env_level")

        assert logger.level == logging.WARNING

    def test_explicit_level_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        logger = get_logger("src.indexer.override", log_level="DEBUG")

        assert logger.level == logging.DEBUG

    def test_invalid_level_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValueError, match="Invalid log level: VERBOSE"):
            get_logger("src.indexer.invalid_level")

    def test_invalid_handler_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid handler"):
            get_logger("src.indexer.invalid_handler", log_handler="file")

    def test_stderr_handler(self) -> None:
        logger = get_logger("src.indexer.stderr", log_handler="stderr")

        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_plain_formatter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LOG_COLOR", raising=False)
        logger = get_logger("src.indexer.plain")

        formatter = logger.handlers[0].formatter
        assert not isinstance(formatter, colorlog.ColoredFormatter)
        assert formatter is not None
        assert formatter._fmt == LOG_FORMAT

    def test_color_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_COLOR", "true")
        logger = get_logger("src.indexer.colored")

        assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_records_reach_caplog(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that records propagate so fatal errors show up in captured logs."""
        logger = get_logger("src.indexer.propagating")

        with caplog.at_level(logging.INFO):
            logger.info("Indexing from block %s to block %s", 100, 109)

        assert "Indexing from block 100 to block 109" in caplog.text
