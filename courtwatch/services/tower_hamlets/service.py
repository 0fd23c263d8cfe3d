"""
Tower Hamlets source – implements the SlotSource protocol.

Every (venue, date) page is fetched concurrently; one page failing
only drops that page's slots.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from courtwatch.models import CanonicalSlot
from courtwatch.services.canonical import (
    date_window,
    make_slot,
    validate_slots,
    within_operating_hours,
)
from courtwatch.services.tower_hamlets.client import ParsedSession, TowerHamletsClient
from courtwatch.services.tower_hamlets.config import (
    DEFAULT_FETCH_DAYS,
    SOURCE_NAME,
    TOWER_HAMLETS_VENUES,
    TowerHamletsVenueConfig,
)

logger = logging.getLogger(__name__)


def transform_sessions(
    sessions: list[ParsedSession],
    venue: TowerHamletsVenueConfig,
    target_date: date,
    today: date | None = None,
) -> list[CanonicalSlot]:
    if not sessions:
        logger.warning("⚠️  No time slots found for %s on %s", venue.id, target_date)
        return []

    slots: list[CanonicalSlot] = []
    for session in sessions:
        slot = make_slot(target_date.isoformat(), f"{session.start_time}:00", venue.id, session.spaces)
        if slot is not None:
            slots.append(slot)

    slots = within_operating_hours(slots, venue.operating_hours, venue.id)
    return validate_slots(slots, today=today)


class TowerHamletsSource:
    def __init__(
        self,
        client: TowerHamletsClient,
        venues: tuple[TowerHamletsVenueConfig, ...] = TOWER_HAMLETS_VENUES,
        *,
        days: int = DEFAULT_FETCH_DAYS,
    ) -> None:
        self._client = client
        self._venues = venues
        self._days = days

    @property
    def name(self) -> str:
        return SOURCE_NAME

    async def fetch_all(self, days: int | None = None) -> list[CanonicalSlot]:
        jobs = [
            self._fetch_page(venue, target_date)
            for venue in self._venues
            for target_date in date_window(days or self._days, venue.timezone)
        ]
        results = await asyncio.gather(*jobs)
        slots = [slot for page in results for slot in page]
        logger.info(
            "✅ Fetched Tower Hamlets booking times for %d venues (%d pages, %d slots)",
            len(self._venues), len(jobs), len(slots),
        )
        return slots

    async def _fetch_page(self, venue: TowerHamletsVenueConfig, target_date: date) -> list[CanonicalSlot]:
        try:
            sessions = await self._client.fetch_sessions(venue.venue, target_date)
            return transform_sessions(sessions, venue, target_date)
        except Exception:
            logger.exception(
                "❌ Error fetching Tower Hamlets availability for %s on %s", venue.id, target_date
            )
            return []
