from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open interval [day 00:00, next day 00:00)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def format_duration(start: datetime, end: Optional[datetime], *, now: Optional[datetime] = None) -> str:
    """Render a visit length as "Xh Ym". Open visits are measured up to now."""
    end = end or now or now_local()
    seconds = abs(int((end - start).total_seconds()))
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"
