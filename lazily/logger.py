"""
Library logging. Every module logs through a LazilyLogger obtained from get_logger(); the
named stdlib logger behind it gets a single console handler and does not propagate, so lazily
output is configured independently of the application's root logger.

Environment overrides, read when a logger is first created:

    LAZILY_LOG_LEVEL   debug, info (default), warning, error
    LAZILY_LOG_OUTPUT  stderr (default) or stdout
    LAZILY_LOG_COLOR   true (default) or false
"""
import logging
import os
import sys
import threading
from typing import Optional

DEFAULT_LOGGER_NAME = "Lazily"

_lock = threading.Lock()
_loggers = {}


class LogFormatter(logging.Formatter):
    """Formatter that fills %(color_on)s / %(color_off)s with ANSI codes for the record level."""

    COLOR_CODES = {
        logging.CRITICAL: "\033[38;5;196m",
        logging.ERROR: "\033[38;5;9m",
        logging.WARNING: "\033[38;5;11m",
        logging.INFO: "\033[38;5;111m",
        logging.DEBUG: "\033[1;30m",
    }
    RESET_CODE = "\033[0m"

    def __init__(self, color, *args, **kwargs):
        super(LogFormatter, self).__init__(*args, **kwargs)
        self.color = color

    def format(self, record, *args, **kwargs):
        color_on = self.COLOR_CODES.get(record.levelno) if self.color else None
        record.color_on = color_on or ""
        record.color_off = self.RESET_CODE if color_on else ""
        return super(LogFormatter, self).format(record, *args, **kwargs)


class LazilyLogger:
    """
    Thin wrapper over a named stdlib logger. The short level methods report the caller's
    function name, not this wrapper's.
    """

    def __init__(self, name, level="info", output="stderr", color=True, template=None):
        self.name = name
        self.level = level.upper()
        self.color = color
        stream = sys.stdout if output == "stdout" else sys.stderr
        if template is None:
            template = f"%(color_on)s[{name}] %(funcName)-5s%(color_off)s: %(message)s"

        handler = logging.StreamHandler(stream)
        handler.setLevel(self.level)
        handler.setFormatter(LogFormatter(color=color, fmt=template))

        self.logger = logging.getLogger(name)
        self.logger.setLevel(self.level)
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def info(self, *args, **kwargs):
        kwargs.setdefault("stacklevel", 2)
        return self.logger.info(*args, **kwargs)

    def warn(self, *args, **kwargs):
        kwargs.setdefault("stacklevel", 2)
        return self.logger.warning(*args, **kwargs)

    def err(self, *args, **kwargs):
        kwargs.setdefault("stacklevel", 2)
        return self.logger.error(*args, **kwargs)

    def d(self, *args, **kwargs):
        kwargs.setdefault("stacklevel", 2)
        return self.logger.debug(*args, **kwargs)

    def is_debug(self):
        return self.logger.isEnabledFor(logging.DEBUG)

    def get_logger(self):
        return self.logger


def _env_flag(value):
    return value.strip().lower() in ("1", "true", "yes", "on")


def _from_environment(name):
    return LazilyLogger(
        name,
        level=os.environ.get("LAZILY_LOG_LEVEL", "info"),
        output=os.environ.get("LAZILY_LOG_OUTPUT", "stderr"),
        color=_env_flag(os.environ.get("LAZILY_LOG_COLOR", "true")),
    )


def get_logger(name: Optional[str] = DEFAULT_LOGGER_NAME) -> LazilyLogger:
    """
    Shared LazilyLogger for name, created from the environment on first use.
    :param name: logger name, the library logger when None
    :return: LazilyLogger
    """
    if name is None:
        name = DEFAULT_LOGGER_NAME
    with _lock:
        if name not in _loggers:
            _loggers[name] = _from_environment(name)
        return _loggers[name]
