"""Date helpers: timestamp parsing, age thresholds and human-readable ages."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pkghealth.exceptions import ParseError

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30

_THRESHOLD_RE = re.compile(r"^(\d+)([ymd])$", re.IGNORECASE)


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp and normalize it to UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days between two instants, regardless of order."""
    return abs(ensure_utc(later) - ensure_utc(earlier)).days


def parse_time_threshold(threshold: str) -> int:
    """Convert ``"2y"`` / ``"6m"`` / ``"90d"`` into days (y=365, m=30)."""
    match = _THRESHOLD_RE.match(threshold.strip())
    if not match:
        raise ParseError(
            f'Invalid time threshold format: {threshold}. Use format like "2y", "6m", or "90d"'
        )
    value = int(match.group(1))
    unit = match.group(2).lower()
    if unit == "y":
        return value * DAYS_PER_YEAR
    if unit == "m":
        return value * DAYS_PER_MONTH
    return value


def _plural(count: int, unit: str) -> str:
    return f"1 {unit}" if count == 1 else f"{count} {unit}s"


def days_to_human(days: int) -> str:
    if days < 1:
        return "today"
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    if days < DAYS_PER_YEAR:
        return _plural(days // DAYS_PER_MONTH, "month")

    years = days // DAYS_PER_YEAR
    remaining_months = (days % DAYS_PER_YEAR) // DAYS_PER_MONTH
    if remaining_months == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} {_plural(remaining_months, 'month')}"
