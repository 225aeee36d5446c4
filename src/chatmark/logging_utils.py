"""Logging setup for the chatmark command line.

Library modules only create module loggers; the parser reports its recovery
decisions (rejected extension fences, intercepted diagrams, depth limits) at
DEBUG level. Handlers are attached here, by the CLI, and nowhere else.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Return the numeric level for ``log_level``.

    Raises
    ------
    ValueError
        If ``log_level`` is a string that names no logging level

    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def _replace_handlers(logger: logging.Logger) -> None:
    # Repeated CLI runs in one process must not leak open log files
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the root logger for a chatmark CLI run.

    Parameters
    ----------
    log_level : int or str
        Numeric level or level name such as ``"DEBUG"``
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Include timestamps, logger names and line numbers
    stream : file-like, optional
        Console stream (defaults to ``sys.stderr``)

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_log_level(log_level)
    formatter = logging.Formatter(
        TRACE_FORMAT if trace_mode else CONSOLE_FORMAT,
        datefmt=TRACE_DATE_FORMAT if trace_mode else None,
    )

    root_logger = logging.getLogger()
    _replace_handlers(root_logger)
    root_logger.setLevel(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if file_error is not None:
        root_logger.warning("Could not create log file %s: %s", log_file, file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)
    return root_logger


__all__ = ["configure_logging", "resolve_log_level"]
