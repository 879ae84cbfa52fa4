"""DateTime utilities for the project."""

from datetime import date, datetime, timedelta, timezone
from typing import Tuple


DATE_RANGE_PRESETS = (
    "today",
    "yesterday",
    "last7days",
    "last30days",
    "last90days",
    "thismonth",
    "lastmonth",
)


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Get current timestamp in ISO format."""
    return utc_now().isoformat()


def parse_iso_timestamp(ts_iso: str) -> datetime:
    """Parse ISO timestamp string to datetime object."""
    return datetime.fromisoformat(ts_iso.replace('Z', '+00:00'))


def ensure_aware(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(dt: datetime) -> str:
    """Serialize a datetime, treating naive values as UTC."""
    return ensure_aware(dt).isoformat()


def elapsed_label(minutes: int) -> str:
    """Human label for an elapsed time, e.g. ``5 minutes ago`` or ``1 hour ago``."""
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    hours = minutes // 60
    return f"{hours} hour{'s' if hours > 1 else ''} ago"


def date_range_preset(preset: str, today: date) -> Tuple[date, date]:
    """Resolve a named date-range preset to an inclusive ``(start, end)`` pair.

    Args:
        preset: One of :data:`DATE_RANGE_PRESETS`
        today: Reference day the preset is relative to

    Raises:
        ValueError: If the preset name is unknown
    """
    if preset == "today":
        return today, today
    if preset == "yesterday":
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if preset == "last7days":
        return today - timedelta(days=6), today
    if preset == "last30days":
        return today - timedelta(days=29), today
    if preset == "last90days":
        return today - timedelta(days=89), today
    if preset == "thismonth":
        return today.replace(day=1), today
    if preset == "lastmonth":
        last_day = today.replace(day=1) - timedelta(days=1)
        return last_day.replace(day=1), last_day
    raise ValueError(f"Unknown date range preset: {preset}")


def local_now() -> datetime:
    """Return the current wall-clock time in the local timezone."""
    return datetime.now().astimezone()
