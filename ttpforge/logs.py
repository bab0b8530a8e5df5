"""Process-wide logger configuration."""

from __future__ import annotations

import logging
import os
import sys
import traceback
from dataclasses import dataclass

_LOGGER_NAME = "ttpforge"

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_LEVEL_COLORS = {
    logging.DEBUG: 35,
    logging.INFO: 34,
    logging.WARNING: 33,
    logging.ERROR: 31,
    logging.CRITICAL: 31,
}


@dataclass
class LogConfig:
    """Formatting options for the global logger."""

    verbose: bool = False
    log_file: str = ""
    no_color: bool = False
    stacktrace: bool = False


class _Formatter(logging.Formatter):
    def __init__(self, color: bool, verbose: bool) -> None:
        super().__init__()
        self._color = color
        self._verbose = verbose

    def _level(self, levelno: int) -> str:
        name = _LEVEL_NAMES.get(levelno, logging.getLevelName(levelno))
        if self._color:
            code = _LEVEL_COLORS.get(levelno, 0)
            return f"\x1b[{code}m{name}\x1b[0m"
        return name

    def format(self, record: logging.LogRecord) -> str:
        fields = []
        if self._verbose:
            fields.append(self.formatTime(record))
        fields.append(self._level(record.levelno))
        if self._verbose:
            fields.append(f"{record.filename}:{record.lineno}")
        fields.append(record.getMessage())
        text = "\t".join(fields)
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            text += "\n" + record.stack_info
        return text


class _StderrHandler(logging.Handler):
    """Writes to whatever ``sys.stderr`` is at the moment of logging."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stderr.write(self.format(record) + "\n")
            sys.stderr.flush()
        except Exception:
            self.handleError(record)


class _StacktraceFilter(logging.Filter):
    """Attaches the calling stack to error records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR and not record.stack_info:
            record.stack_info = "Stack (most recent call last):\n" + "".join(
                traceback.format_stack()[:-1]
            )
        return True


def get_logger() -> logging.Logger:
    """Return the global logger."""
    return logging.getLogger(_LOGGER_NAME)


def init_log(config: LogConfig) -> None:
    """Configure the global logger according to ``config``."""
    formatter = _Formatter(color=not config.no_color, verbose=config.verbose)
    handlers: list[logging.Handler] = [_StderrHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(os.path.abspath(config.log_file), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logger = get_logger()
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for old_filter in list(logger.filters):
        logger.removeFilter(old_filter)

    logger.setLevel(logging.DEBUG if config.verbose else logging.INFO)
    logger.propagate = False
    if config.stacktrace:
        logger.addFilter(_StacktraceFilter())
    for handler in handlers:
        logger.addHandler(handler)


init_log(LogConfig())