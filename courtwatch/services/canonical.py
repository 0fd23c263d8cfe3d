"""
Canonicalization helpers shared by every source adapter.

Each adapter turns its provider's raw records into CanonicalSlot values
with these building blocks: time normalization, record validation,
operating-hours filtering, stale-date pruning and natural-key dedup.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from courtwatch.models import CanonicalSlot, SlotKey

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/London"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


@dataclass(frozen=True)
class OperatingHours:
    """Opening window of a venue/activity, both ends inclusive ("HH:MM")."""

    start: str
    end: str

    def contains(self, time_str: str) -> bool:
        minutes = _minutes_of_day(time_str)
        if minutes is None:
            return False
        return _minutes_of_day(self.start) <= minutes <= _minutes_of_day(self.end)


def _minutes_of_day(time_str: str) -> int | None:
    normalized = normalize_time(time_str)
    if normalized is None:
        return None
    hours, minutes, _ = normalized.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_time(value: str | None) -> str | None:
    """Return *value* as "HH:MM:SS", or None if it is not a valid time."""
    if not value:
        return None
    match = _TIME_RE.match(value.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def minutes_to_time(minutes: int) -> str:
    """Minute offset from midnight → "HH:MM:SS"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}:00"


def today_in(timezone: str = DEFAULT_TIMEZONE) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


def date_window(days: int, timezone: str = DEFAULT_TIMEZONE, start: date | None = None) -> list[date]:
    """*days* consecutive dates starting today (in the venue's timezone)."""
    first = start or today_in(timezone)
    return [first + timedelta(days=offset) for offset in range(days)]


def make_slot(date_str: str, time_str: str, location: str, spaces: int) -> CanonicalSlot | None:
    """Build a CanonicalSlot, or log and return None if the record is invalid."""
    try:
        return CanonicalSlot(date=date_str, time=time_str, location=location, spaces=spaces)
    except ValidationError as exc:
        logger.warning(
            "⚠️  Skipping invalid slot %s %s @ %s (spaces=%r): %d error(s)",
            date_str, time_str, location, spaces, exc.error_count(),
        )
        return None


def within_operating_hours(
    slots: Iterable[CanonicalSlot],
    hours: OperatingHours | None,
    label: str,
) -> list[CanonicalSlot]:
    """Drop slots starting outside *hours*. No configured hours keeps everything."""
    if hours is None:
        return list(slots)
    kept: list[CanonicalSlot] = []
    for slot in slots:
        if hours.contains(slot.time):
            kept.append(slot)
        else:
            logger.warning("⚠️  Slot outside operating hours: %s for %s", slot.time, label)
    return kept


def validate_slots(slots: Iterable[CanonicalSlot], today: date | None = None) -> list[CanonicalSlot]:
    """
    Final pass before slots leave an adapter (or enter the snapshot).

    Slots dated more than one day before *today* (default: today in
    London) are dropped, then duplicates of the (date, time, location)
    key are removed keeping the first occurrence.
    """
    slots = list(slots)
    cutoff = (today or today_in()) - timedelta(days=1)

    current = [s for s in slots if date.fromisoformat(s.date) >= cutoff]
    if len(current) != len(slots):
        logger.warning("⚠️  Filtered out %d stale slots", len(slots) - len(current))

    seen: set[SlotKey] = set()
    unique: list[CanonicalSlot] = []
    for slot in current:
        if slot.key in seen:
            continue
        seen.add(slot.key)
        unique.append(slot)

    if len(unique) != len(current):
        logger.warning("⚠️  Removed %d duplicate slots", len(current) - len(unique))
    return unique
