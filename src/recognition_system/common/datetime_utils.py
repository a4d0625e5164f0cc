from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values (MySQL DATETIME) and convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC for DATETIME columns."""
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def parse_iso_datetime(value: str) -> datetime:
    """Parse ISO-8601 string (``Z`` suffix accepted) into aware UTC datetime."""
    v = (value or "").strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(v))


def month_index(year: int, month: int) -> int:
    """Sortable index of a (year, 0-based month) pair."""
    return int(year) * 12 + int(month)
