"""Timestamp helpers; all stored times are UTC."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the UTC [start, end) window of the day containing ``now``."""
    moment = (now or utc_now()).astimezone(timezone.utc)
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
