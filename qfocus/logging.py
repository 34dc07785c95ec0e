"""Logging utilities for qfocus.

Every module obtains its logger through :func:`get_logger`, which places it
under the ``qfocus.`` namespace and attaches a single stderr handler. Layout
changes on registers are logged at DEBUG; renderer file writes at INFO.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_DEFAULT_LEVEL = logging.WARNING

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _install_handler(
    logger: logging.Logger,
    level: int,
    stream: Optional[IO[str]] = None,
    format_string: str = _FORMAT,
) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached qfocus logger for ``name``.

    Args:
        name: Usually ``__name__`` of the caller. Names outside the
            ``qfocus`` namespace are prefixed with ``qfocus.``. If None,
            the package logger is returned.

    Returns:
        A configured :class:`logging.Logger` that does not propagate to the
        root logger.

    Example:
        >>> from qfocus.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("focused qubits %s", (0, 2))
    """
    if name is None:
        name = "qfocus"
    if name != "qfocus" and not name.startswith("qfocus."):
        name = f"qfocus.{name}"

    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    if not logger.handlers:
        _install_handler(logger, _DEFAULT_LEVEL)
        logger.propagate = False

    _loggers[name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every qfocus logger, including ones created later.

    Args:
        level: A :mod:`logging` level or its name (``"DEBUG"``, ``"INFO"``...).
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
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
    """Replace the handlers of every cached qfocus logger.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format; defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: ``sys.stderr``).
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)
    for logger in _loggers.values():
        _install_handler(logger, level, stream, format_string or _FORMAT)
    _DEFAULT_LEVEL = level
