#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for CLI logging configuration."""

import io
import logging

import pytest

from chatmark.cli import main
from chatmark.logging_utils import configure_logging, resolve_log_level


pytestmark = pytest.mark.usefixtures("restore_root_logging")


@pytest.mark.unit
@pytest.mark.cli
class TestResolveLogLevel:
    """Tests for level name resolution."""

    @pytest.mark.parametrize("value,expected", [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), (5, 5)])
    def test_known_levels(self, value, expected: int) -> None:
        """Test names in any case and numeric levels."""
        assert resolve_log_level(value) == expected

    def test_unknown_level(self) -> None:
        """Test that a bogus name is rejected."""
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_log_level("LOUD")


@pytest.mark.unit
@pytest.mark.cli
class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_handler(self) -> None:
        """Test that records reach the console stream with the short format."""
        stream = io.StringIO()
        root = configure_logging("INFO", stream=stream)

        logging.getLogger("chatmark.test").info("hello")

        assert root.level == logging.INFO
        assert stream.getvalue() == "INFO: hello\n"

    def test_level_filters(self) -> None:
        """Test that records below the level are dropped."""
        stream = io.StringIO()
        configure_logging(logging.WARNING, stream=stream)

        logging.getLogger("chatmark.test").debug("hidden")

        assert stream.getvalue() == ""

    def test_trace_format(self) -> None:
        """Test that trace mode adds the logger name and line number."""
        stream = io.StringIO()
        configure_logging(logging.DEBUG, trace_mode=True, stream=stream)

        logging.getLogger("chatmark.trace").debug("detail")

        assert "[DEBUG] [chatmark.trace:" in stream.getvalue()
        assert stream.getvalue().startswith("[")

    def test_repeated_configuration_replaces_handlers(self) -> None:
        """Test that a second call does not stack console handlers."""
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)
        configure_logging("INFO", stream=stream)

        logging.getLogger("chatmark.test").info("once")

        assert stream.getvalue().count("once") == 1

    def test_log_file(self, tmp_path) -> None:
        """Test that records are also written to the log file."""
        log_file = tmp_path / "chatmark.log"
        configure_logging("INFO", log_file=str(log_file), stream=io.StringIO())

        logging.getLogger("chatmark.test").warning("to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Logging to file" in content
        assert "WARNING: to file" in content

    def test_unwritable_log_file(self, tmp_path) -> None:
        """Test that a bad log path is reported and console logging still works."""
        stream = io.StringIO()
        configure_logging("INFO", log_file=str(tmp_path / "missing" / "x.log"), stream=stream)

        assert "Could not create log file" in stream.getvalue()


@pytest.mark.unit
@pytest.mark.cli
class TestCliLoggingFlags:
    """Tests for --log-file and --trace through main()."""

    def test_trace_logs_recovery_decisions(self, tmp_path, monkeypatch) -> None:
        """Test that --trace writes parser debug records to the log file."""
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        reply = tmp_path / "reply.md"
        reply.write_text("```task\nno title\n```", encoding="utf-8")
        log_file = tmp_path / "run.log"

        assert main([str(reply), "--trace", "--log-file", str(log_file)]) == 0
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "chatmark.parsers.extensions" in content
        assert "rejected" in content
