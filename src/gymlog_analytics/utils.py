"""Shared helpers for parsing loosely-typed session records."""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any

EPOCH_MILLIS_THRESHOLD = 1_000_000_000_000


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an instant from a datetime, epoch number or ISO 8601 string.

    Naive values are taken as UTC. Epoch values above 1e12 are milliseconds
    (what the mobile client stored as ids and dates). Returns None when the
    value cannot be interpreted.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, bool):
        return None

    raw: str | None = None
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, str):
        raw = value.strip()
    if not raw:
        return None

    numeric = raw.replace(".", "", 1)
    if numeric.isdigit():
        return _from_epoch(raw)

    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return as_utc(parsed)


def _from_epoch(value: Any) -> datetime | None:
    try:
        epoch = float(value)
    except OverflowError:
        return None
    if not math.isfinite(epoch):
        return None
    if epoch > EPOCH_MILLIS_THRESHOLD:
        epoch /= 1000.0
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def as_optional_float(value: Any) -> float | None:
    """Coerce a user-entered number; blank, negative or junk input is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(parsed) or parsed < 0:
        return None
    return parsed


def as_optional_int(value: Any) -> int | None:
    """Like as_optional_float, truncating towards zero ("8.0" -> 8)."""
    parsed = as_optional_float(value)
    if parsed is None:
        return None
    return int(parsed)


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, .5 going up."""
    return int(math.floor(value + 0.5))


def start_of_week(now: datetime) -> datetime:
    """Sunday 00:00 UTC of the calendar week containing ``now``."""
    now_utc = as_utc(now)
    # isoweekday: Monday=1 .. Sunday=7
    days_since_sunday = now_utc.isoweekday() % 7
    day = now_utc.date() - timedelta(days=days_since_sunday)
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def utc_day(ts: datetime) -> date:
    return as_utc(ts).date()
