# topmark:header:start
#
#   project      : WithProps
#   file         : logging.py
#   file_relpath : src/withprops/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 The WithProps Authors
#
# topmark:header:end

"""WithProps logging with a TRACE level and colored output.

The guard logs every property it overwrites and restores at TRACE level, a one-line
summary per scope at DEBUG level, and restoration failures at WARNING level. Nothing
is printed unless the host application (or
[`setup_logging`][withprops.config.logging.setup_logging]) configures a handler.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

from withprops.config.settings import ENV_LOG_LEVEL

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = (
    "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"
)

_LEVEL_NAMES: Final[Mapping[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class WithPropsLogger(logging.Logger):
    """Logger class with support for a TRACE level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Arguments merged into ``msg``.
            extra (Mapping[str, object] | None): Optional extra information for the record.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if logging.getLevelName(TRACE_LEVEL) != "TRACE":
    logging.addLevelName(TRACE_LEVEL, "TRACE")


class ChalkFormatter(logging.Formatter):
    """Formatter that colors records with chalk based on their severity."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and color it by level.

        Args:
            record (logging.LogRecord): The record to format.

        Returns:
            str: The colorized message.
        """
        level: int = record.levelno
        message: str = super().format(record)

        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        if level >= logging.DEBUG:
            return chalk.gray(message)
        if level >= TRACE_LEVEL:
            return chalk.blue(message)
        return chalk.dim.red(message)


def parse_log_level(raw: str | None) -> int | None:
    """Return the logging level for a level name or number, or None if unknown.

    Accepts names such as ``"TRACE"`` or ``"debug"`` and numeric strings such as ``"10"``.
    """
    if raw is None:
        return None
    token: str = raw.strip().upper()
    if not token:
        return None
    if token.isdigit():
        return int(token)
    return _LEVEL_NAMES.get(token)


def resolve_env_log_level() -> int | None:
    """Return the level configured in ``WITHPROPS_LOG_LEVEL``, or None if unset/invalid."""
    return parse_log_level(os.environ.get(ENV_LOG_LEVEL))


def setup_logging(level: int | None = None) -> None:
    """Configure the ``withprops`` logger with colored output on stdout.

    If ``level`` is None, ``WITHPROPS_LOG_LEVEL`` is consulted. Default is CRITICAL
    when neither is given, which keeps the library silent.

    Args:
        level (int | None): Explicit log level, or None to use the environment.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    package_logger: logging.Logger = logging.getLogger("withprops")
    package_logger.setLevel(level)

    # Drop handlers from an earlier call so records are not emitted twice
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT)
    )
    package_logger.addHandler(handler)
    package_logger.propagate = False


def get_logger(name: str) -> WithPropsLogger:
    """Return a `WithPropsLogger` with the given name.

    The logger class is installed only for this call so host applications keep their
    own default logger class. A logger the host created earlier under the same name
    (e.g. through ``logging.config.dictConfig``) keeps its identity and configuration;
    only its class is switched so that `trace` is available.

    Args:
        name (str): Dotted logger name, usually ``__name__``.

    Returns:
        WithPropsLogger: The logger.
    """
    previous: type[logging.Logger] = logging.getLoggerClass()
    logging.setLoggerClass(WithPropsLogger)
    try:
        logger: logging.Logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)

    if not isinstance(logger, WithPropsLogger):
        logger.__class__ = _with_trace(type(logger))
    return cast("WithPropsLogger", logger)


def _with_trace(logger_class: type[logging.Logger]) -> type[WithPropsLogger]:
    if logger_class is logging.Logger:
        return WithPropsLogger
    return type(f"WithProps{logger_class.__name__}", (WithPropsLogger, logger_class), {})
