"""
Better source – implements the SlotSource protocol.

Translates Better activity-times records into CanonicalSlot values.
This is the only layer that knows about both the Better record shape
and the canonical slot model.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from courtwatch.models import CanonicalSlot
from courtwatch.services.better.api_models import BetterTimeSlot
from courtwatch.services.better.client import BetterClient
from courtwatch.services.better.config import (
    BETTER_VENUES,
    DEFAULT_FETCH_DAYS,
    SOURCE_NAME,
    VenueActivity,
    VenueConfig,
    venue_activities,
)
from courtwatch.services.canonical import (
    date_window,
    make_slot,
    normalize_time,
    validate_slots,
    within_operating_hours,
)

logger = logging.getLogger(__name__)


def parse_records(records: list[Any], label: str) -> list[BetterTimeSlot]:
    """Keep the records that carry a date, a start time and a space count."""
    parsed: list[BetterTimeSlot] = []
    for record in records:
        try:
            parsed.append(BetterTimeSlot.model_validate(record))
        except ValidationError:
            continue
    if len(parsed) != len(records):
        logger.warning("⚠️  Filtered out %d invalid slots for %s", len(records) - len(parsed), label)
    return parsed


def _start_time(record: BetterTimeSlot, timezone: str) -> str | None:
    if record.start_24h:
        return normalize_time(record.start_24h)
    return datetime.fromtimestamp(record.timestamp, ZoneInfo(timezone)).strftime("%H:%M:%S")


def transform_records(
    records: list[Any],
    pair: VenueActivity,
    today: date | None = None,
) -> list[CanonicalSlot]:
    """Raw Better records for one venue/activity → validated canonical slots."""
    label = pair.location_id
    slots: list[CanonicalSlot] = []
    for record in parse_records(records, label):
        time_str = _start_time(record, pair.venue.timezone)
        if time_str is None:
            logger.warning("⚠️  Skipping slot with unreadable start time %r for %s", record.start_24h, label)
            continue
        slot = make_slot(record.date, time_str, label, record.spaces)
        if slot is not None:
            slots.append(slot)

    slots = within_operating_hours(slots, pair.activity.operating_hours, label)
    return validate_slots(slots, today=today)


class BetterSource:
    """
    Polls every configured venue/activity for each day of the window.

    Requests are issued one at a time with a fixed pause in between so
    the upstream is never hit in parallel.
    """

    def __init__(
        self,
        client: BetterClient,
        venues: tuple[VenueConfig, ...] = BETTER_VENUES,
        *,
        days: int = DEFAULT_FETCH_DAYS,
        request_delay: float = 0.5,
    ) -> None:
        self._client = client
        self._pairs = venue_activities(venues)
        self._days = days
        self._request_delay = request_delay

    @property
    def name(self) -> str:
        return SOURCE_NAME

    async def fetch_all(self, days: int | None = None) -> list[CanonicalSlot]:
        timezone = self._pairs[0].venue.timezone if self._pairs else "Europe/London"
        dates = date_window(days or self._days, timezone)
        logger.info(
            "🎾 Fetching Better slots for %d venue/activity pairs across %d dates",
            len(self._pairs), len(dates),
        )

        all_slots: list[CanonicalSlot] = []
        first_request = True
        for target_date in dates:
            for pair in self._pairs:
                if not first_request:
                    await asyncio.sleep(self._request_delay)
                first_request = False
                try:
                    records = await self._client.fetch_booking_times(
                        pair.venue.venue, pair.activity.activity, target_date
                    )
                    if not records:
                        logger.warning("⚠️  No data for %s on %s", pair.activity.display_name, target_date)
                        continue
                    slots = transform_records(records, pair)
                except Exception:
                    logger.exception(
                        "❌ Failed to fetch %s for %s", pair.activity.display_name, target_date
                    )
                    continue

                logger.info(
                    "✅ %s on %s: %d raw records, %d valid slots",
                    pair.activity.display_name, target_date, len(records), len(slots),
                )
                all_slots.extend(slots)

        return all_slots
