"""Trailing time windows (fixed durations, not calendar-aware)."""

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Literal

from .models import WorkoutSession
from .utils import as_utc

Window = Literal["week", "month", "year"]

WINDOW_DURATIONS: dict[str, timedelta] = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

WINDOWS: tuple[str, ...] = tuple(WINDOW_DURATIONS)


def window_duration(window: str) -> timedelta:
    try:
        return WINDOW_DURATIONS[window]
    except KeyError:
        allowed = ", ".join(WINDOWS)
        raise ValueError(f"Unknown window {window!r}; expected one of: {allowed}") from None


def filter_by_period(
    sessions: Iterable[WorkoutSession], now: datetime, window: str
) -> list[WorkoutSession]:
    """Sessions with ``now - timestamp <= duration``, in input order."""
    duration = window_duration(window)
    now_utc = as_utc(now)
    return [s for s in sessions if now_utc - s.timestamp <= duration]
