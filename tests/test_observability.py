"""
Tests for logging setup — console level and the append-only log file.
"""

import io
import logging
import re
import sys
from pathlib import Path

from mcp_provision.core.observability.logging_config import _parse_level, setup_logging

LINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}: hello$")


class TestSetupLogging:
    def test_file_format(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "install.log"
        setup_logging(level="ERROR", log_file=log_file)

        logging.getLogger("mcp_provision.test").info("hello")

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        assert LINE_RE.match(lines[0])

    def test_appends_across_runs(self, tmp_path: Path):
        log_file = tmp_path / "install.log"
        log_file.write_text("previous run\n")

        setup_logging(log_file=log_file)
        logging.getLogger("mcp_provision.test").info("hello")

        lines = log_file.read_text().splitlines()
        assert lines[0] == "previous run"
        assert lines[1].endswith(": hello")

    def test_debug_not_in_file_by_default(self, tmp_path: Path):
        log_file = tmp_path / "install.log"
        setup_logging(log_file=log_file)
        logging.getLogger("mcp_provision.test").debug("noise")
        assert "noise" not in log_file.read_text()

    def test_console_level(self):
        setup_logging(level="WARNING")
        console = logging.getLogger().handlers[0]
        assert console.level == logging.WARNING

    def test_unwritable_log_file_is_skipped(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        setup_logging(log_file=blocker / "install.log")
        assert len(logging.getLogger().handlers) == 1


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_fallback(self):
        assert _parse_level("bogus") == logging.INFO
        assert _parse_level(None) == logging.INFO


class TestConsoleStream:
    def test_defaults_to_stdout(self):
        setup_logging()
        assert logging.getLogger().handlers[0].stream is sys.stdout

    def test_custom_stream(self):
        buf = io.StringIO()
        setup_logging(level="INFO", stream=buf)
        logging.getLogger("mcp_provision.test").info("to the side")
        assert buf.getvalue() == "to the side\n"
