"""Shared time utilities for Hooks Lab.

Log lines and record timestamps use the machine's local timezone, matching
what a user sees in their terminal.  Session ids use whole Unix seconds.

Design Principles:
    - Records carry ISO-8601 timestamps at second precision with offset
    - Log lines carry a wall-clock time with millisecond precision
    - Callers may pass ``now`` explicitly so tests can pin the clock
"""

from __future__ import annotations

import time
from datetime import datetime


def local_now() -> datetime:
    """Get the current local datetime (timezone-aware).

    Returns:
        A timezone-aware datetime in the system's local timezone.

    Example:
        >>> from hooks_lab.core.utils import local_now
        >>> local_now().tzinfo is not None
        True
    """
    return datetime.now().astimezone()


def iso_seconds(now: datetime | None = None) -> str:
    """Format a timestamp like ``2024-01-15T10:30:00+01:00``."""
    return (now or local_now()).isoformat(timespec="seconds")


def clock_millis(now: datetime | None = None) -> str:
    """Format a log-line time like ``10:30:00.123``."""
    now = now or local_now()
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def unix_seconds() -> int:
    """Whole seconds since the epoch."""
    return int(time.time())
