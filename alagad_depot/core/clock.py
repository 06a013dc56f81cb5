# alagad_depot/core/clock.py
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are read as UTC; aware ones pass through."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def fixed_clock(at: datetime) -> Clock:
    """Clock that always answers `at` (naive values are read as UTC)."""
    at = as_utc(at)
    return lambda: at
