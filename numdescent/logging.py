"""Logging utilities for numdescent.

All package loggers live under the ``numdescent`` namespace, write to stderr
and do not propagate to the root logger, so an application's own logging
configuration is left untouched unless it opts in.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_ROOT_NAME = "numdescent"

_loggers: dict[str, logging.Logger] = {}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _make_handler(level: int, stream: Optional[IO[str]], format_string: str) -> logging.Handler:
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a package logger.

    Loggers are cached so repeated calls never stack handlers. Pass
    ``__name__`` from the calling module; names outside the package
    namespace are nested under ``numdescent.``.

    Args:
        name: Logger name. ``None`` returns the package root logger.

    Returns:
        Configured logger instance.

    Example:
        >>> from numdescent.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("gradient norm %.3e", 1e-5)
    """
    if name is None:
        name = _ROOT_NAME
    if name == _ROOT_NAME or name.startswith(_ROOT_NAME + "."):
        logger_name = name
    else:
        logger_name = f"{_ROOT_NAME}.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        logger.addHandler(_make_handler(_DEFAULT_LEVEL, None, _DEFAULT_FORMAT))
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every numdescent logger and of loggers created later.

    Args:
        level: ``logging`` level constant or its name (``"DEBUG"``, ``"INFO"``...).
    """
    global _DEFAULT_LEVEL
    level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the handlers of all numdescent loggers.

    Typically called once at application startup, e.g. to turn on per
    iteration tracing of an optimizer::

        configure_logging(level="DEBUG")

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. ``None`` keeps the default.
        stream: Output stream (default: ``sys.stderr``).
    """
    global _DEFAULT_LEVEL
    level = _resolve_level(level)
    format_string = format_string or _DEFAULT_FORMAT
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_make_handler(level, stream, format_string))
    _DEFAULT_LEVEL = level


__all__ = ["get_logger", "set_log_level", "configure_logging"]
