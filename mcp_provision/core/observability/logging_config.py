"""
Logging configuration for the provisioning CLI.

main.py calls ``setup_logging`` once before any step runs; every module
logs through ``logging.getLogger(__name__)`` and inherits it.

The console prints bare messages at INFO. ``--verbose`` adds the time
and logger name, ``--debug`` adds level and line number, and
``--quiet`` keeps errors only. It writes to stdout, except for commands
whose stdout is a document. The install log is appended to on every
run with one timestamped line per record.

Console level precedence:
    CLI flag  >  MCP_PROVISION_LOG_LEVEL env var  >  INFO
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

CONSOLE_FORMATS: dict[str, tuple[str, str | None]] = {
    "plain": ("%(message)s", None),
    "verbose": ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    "debug": ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
}

# Install log lines look like "2025-05-01 10:00:00: Installing uv..."
INSTALL_LOG_FORMAT = "%(asctime)s: %(message)s"
INSTALL_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_CHATTY_LIBRARIES = ("urllib3", "charset_normalizer")


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
    verbose: bool = False,
    quiet_third_party: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Install the console handler and, optionally, the install log.

    Args:
        level: Console level name.
        log_file: Path of the append-only install log. Missing parent
            directories are created. If the file cannot be opened a
            warning is printed and the run continues without it.
        log_file_level: Level for the install log, INFO when omitted,
            so the log records the whole run even under ``--quiet``.
        verbose: Use the verbose console format.
        quiet_third_party: Hold chatty library loggers at WARNING
            unless the console is at DEBUG.
        stream: Console stream, stdout when omitted.
    """
    console_level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level, verbose, stream or sys.stdout))
    root.setLevel(console_level)

    if log_file:
        file_level = _parse_level(log_file_level or "INFO")
        handler = _install_log_handler(Path(log_file), file_level)
        if handler is not None:
            root.addHandler(handler)
            root.setLevel(min(console_level, file_level))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _CHATTY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _console_handler(level: int, verbose: bool, stream: TextIO) -> logging.Handler:
    if level <= logging.DEBUG:
        style = "debug"
    else:
        style = "verbose" if verbose else "plain"
    fmt, datefmt = CONSOLE_FORMATS[style]

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _install_log_handler(path: Path, level: int) -> logging.Handler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Cannot open log file %s: %s", path, e)
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(INSTALL_LOG_FORMAT, datefmt=INSTALL_LOG_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level. Unknown or empty names mean INFO."""
    return logging.getLevelNamesMapping().get((level or "").upper(), logging.INFO)
