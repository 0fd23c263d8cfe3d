"""
LTA source – implements the SlotSource protocol.

ClubSpark describes availability as sessions per court with a binary
capacity flag. Sessions are cut into fixed-width buckets and counted
across all courts of the venue, so a canonical slot's `spaces` is the
number of courts free at that time.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from courtwatch.models import CanonicalSlot
from courtwatch.services.canonical import (
    date_window,
    make_slot,
    minutes_to_time,
    validate_slots,
    within_operating_hours,
)
from courtwatch.services.lta.api_models import LtaDay, LtaResource, LtaSession, LtaVenueSessions
from courtwatch.services.lta.client import LtaClient
from courtwatch.services.lta.config import (
    CAPACITY_AVAILABLE,
    DEFAULT_FETCH_DAYS,
    LTA_VENUES,
    SOURCE_NAME,
    LtaVenueConfig,
)

logger = logging.getLogger(__name__)

# (date, "HH:MM:SS")
_BucketKey = tuple[str, str]
_Model = TypeVar("_Model", bound=BaseModel)


@dataclass
class BucketTally:
    total: int = 0
    available: int = 0


def _validate_each(model: type[_Model], items: list[Any], label: str) -> list[_Model]:
    """Validate *items* one by one, logging and skipping the malformed ones."""
    valid: list[_Model] = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            continue
    if len(valid) != len(items):
        logger.warning("⚠️  Skipped %d malformed LTA %s", len(items) - len(valid), label)
    return valid


def tally_sessions(
    response: LtaVenueSessions,
    duration_minutes: int = 60,
) -> dict[_BucketKey, BucketTally]:
    """
    Count courts per (date, bucket start) across all resources.

    Every bucket a session covers counts towards `total`; only buckets of
    sessions with the available capacity flag count towards `available`.
    Malformed resources, days and sessions are skipped individually.
    """
    tallies: dict[_BucketKey, BucketTally] = {}
    for resource in _validate_each(LtaResource, response.Resources, "resources"):
        for day in _validate_each(LtaDay, resource.Days, "days"):
            date_str = day.Date.split("T")[0]
            for session in _validate_each(LtaSession, day.Sessions, "sessions"):
                buckets = (session.EndTime - session.StartTime) // duration_minutes
                for i in range(buckets):
                    start = session.StartTime + i * duration_minutes
                    tally = tallies.setdefault((date_str, minutes_to_time(start)), BucketTally())
                    tally.total += 1
                    if session.Capacity == CAPACITY_AVAILABLE:
                        tally.available += 1
    return tallies


def transform_sessions(
    response: LtaVenueSessions,
    venue: LtaVenueConfig,
    today: date | None = None,
) -> list[CanonicalSlot]:
    """ClubSpark sessions for one venue → validated canonical slots."""
    if not response.Resources:
        logger.warning("⚠️  No resources found in LTA response for %s", venue.id)
        return []

    tallies = tally_sessions(response, venue.slot_duration_minutes)
    slots: list[CanonicalSlot] = []
    for (date_str, time_str), tally in sorted(tallies.items()):
        slot = make_slot(date_str, time_str, venue.id, tally.available)
        if slot is not None:
            slots.append(slot)

    slots = within_operating_hours(slots, venue.operating_hours, venue.id)
    slots = validate_slots(slots, today=today)
    logger.info(
        "✅ Transformed %d aggregated LTA slots for %s (%d courts)",
        len(slots), venue.id, len(response.Resources),
    )
    return slots


class LtaSource:
    """Queries every configured ClubSpark venue concurrently."""

    def __init__(
        self,
        client: LtaClient,
        venues: tuple[LtaVenueConfig, ...] = LTA_VENUES,
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
        results = await asyncio.gather(
            *(self._fetch_venue(venue, days or self._days) for venue in self._venues)
        )
        return [slot for venue_slots in results for slot in venue_slots]

    async def _fetch_venue(self, venue: LtaVenueConfig, days: int) -> list[CanonicalSlot]:
        dates = date_window(days, venue.timezone)
        try:
            response = await self._client.get_venue_sessions(venue.venue, dates[0], dates[-1])
            return transform_sessions(response, venue)
        except Exception:
            logger.exception(
                "❌ Error fetching LTA sessions for %s (%s to %s)", venue.id, dates[0], dates[-1]
            )
            return []
