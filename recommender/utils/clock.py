"""
Time helpers: age of content, time-of-day buckets.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO string (or pass through a datetime) as a tz-aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def hours_since(published_at: Optional[datetime], now: Optional[datetime] = None) -> float:
    """Hours elapsed since published_at. Unknown timestamps count as very old."""
    published = parse_timestamp(published_at)
    if published is None:
        return float("inf")
    now = parse_timestamp(now) or utc_now()
    return (now - published).total_seconds() / 3600.0


def days_since(timestamp: Optional[datetime], now: Optional[datetime] = None) -> float:
    return hours_since(timestamp, now) / 24.0


def time_of_day(hour: int) -> str:
    """Bucket an hour (0-23) into night/morning/afternoon/evening."""
    if hour < 6:
        return "night"
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    if hour < 22:
        return "evening"
    return "night"
