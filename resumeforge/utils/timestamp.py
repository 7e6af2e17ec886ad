"""Timestamp formatting utilities and injectable clocks."""

from datetime import datetime
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can tell the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """
    Clock frozen at a given instant.

    Used by tests and by callers that need reproducible timestamps and ids.
    """

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


DEFAULT_CLOCK = SystemClock()


def now(clock: Optional[Clock] = None) -> str:
    """Timestamp suitable for directory names, e.g. 20251114_123456."""
    return (clock or DEFAULT_CLOCK).now().strftime("%Y%m%d_%H%M%S")


def now_exact(clock: Optional[Clock] = None) -> str:
    """ISO 8601 timestamp with milliseconds, e.g. 2025-11-14T12:34:56.789."""
    return (clock or DEFAULT_CLOCK).now().isoformat(timespec="milliseconds")


def today(clock: Optional[Clock] = None) -> str:
    """Date stamp, e.g. 2025-11-14."""
    return (clock or DEFAULT_CLOCK).now().strftime("%Y-%m-%d")


def format_timestamp(iso_timestamp: str, relative: bool = False, clock: Optional[Clock] = None) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")
        clock: Reference clock for relative times (default: system clock)

    Returns:
        Human-readable timestamp, or the input unchanged if it cannot be parsed

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549")
        # "2025-11-13 18:45:40"
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)
    except (TypeError, ValueError):
        return iso_timestamp

    if relative:
        return _format_relative_time(dt, (clock or DEFAULT_CLOCK).now())
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _format_relative_time(dt: datetime, reference: datetime) -> str:
    """
    Format datetime as relative time in compact format (e.g., "2h ago").

    - Seconds: "30s ago"
    - Minutes: "15m ago"
    - Hours: "2h ago"
    - Days: "5d ago"
    """
    diff = reference - dt

    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = diff.days

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{days}d {suffix}"
