from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytz

from ..core.exceptions import InvalidCutoff, InvalidInput


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_utc() -> datetime:
    """Current time as a naive UTC datetime (the storage convention).

    Truncated to whole seconds to match the DATETIME columns, which would
    otherwise round (17:59:59.6 would be stored as 18:00:00).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def parse_cutoff(value) -> time:
    """Parse a daily auto-sign-out time.

    Accepts ``datetime.time`` or ``HH:MM`` / ``HH:MM:SS`` strings in the range
    00:00:00-23:59:59. Sub-second precision is dropped.
    """
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)

    if not isinstance(value, str) or not value.strip():
        raise InvalidCutoff("Auto sign-out time is required (HH:MM:SS)")

    raw = value.strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise InvalidCutoff(f"Invalid auto sign-out time (HH:MM:SS): {raw!r}")


def get_zone(name: str):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown time zone: {name!r}")


def cutoff_instant(day: date, cutoff: time, zone) -> datetime:
    """Naive UTC instant of ``cutoff`` on ``day`` in the canonical zone."""
    local = zone.localize(datetime.combine(day, cutoff))
    return local.astimezone(pytz.utc).replace(tzinfo=None)


def latest_cutoff(now: datetime, cutoff: time, zone) -> datetime:
    """Most recent cutoff instant at or before ``now`` (naive UTC)."""
    local_now = pytz.utc.localize(now).astimezone(zone)
    instant = cutoff_instant(local_now.date(), cutoff, zone)
    if instant > now:
        instant = cutoff_instant(local_now.date() - timedelta(days=1), cutoff, zone)
    return instant


def local_date_of(instant: datetime, zone) -> date:
    return pytz.utc.localize(instant).astimezone(zone).date()
