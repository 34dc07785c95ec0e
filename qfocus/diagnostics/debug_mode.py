"""Debug mode management for qfocus.

Debug mode turns on extra invariant checks (e.g. normalization after an
operator is applied). It is off at import time and only changes through the
functions below.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

_debug_enabled: bool = False


def is_debug_enabled() -> bool:
    """Return whether qfocus debug mode is currently enabled."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """
    Globally enable or disable qfocus debug mode.

    Parameters
    ----------
    enabled:
        Whether to enable debug mode.
    """
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily enable or disable debug mode.

    Example
    -------
    >>> with debug_context(True):
    ...     apply_matrix_(reg, matrix)  # normalization asserted afterwards
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev
