from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values read back from SQLite."""

    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar day as stored in the date columns."""

    try:
        return date.fromisoformat(value.strip()[:10])
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def shift_day(value: str, days: int) -> str:
    return (parse_day(value) + timedelta(days=days)).isoformat()


__all__ = ["UTC", "ensure_utc", "parse_day", "shift_day", "utc_now"]
