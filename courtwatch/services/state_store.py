"""
Availability snapshot and diffing.

The snapshot persisted at the end of a run is the baseline for the
next one. Only a slot going from zero free spaces to some free spaces
counts as a transition; slots seen for the first time never do.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from courtwatch import db
from courtwatch.models import CanonicalSlot, SlotKey, StoredSlot, TransitionSlot
from courtwatch.services.canonical import validate_slots

logger = logging.getLogger(__name__)


class SlotStateStore:
    """Reads, diffs and replaces the persisted availability snapshot."""

    async def get_previous_state(self) -> list[StoredSlot]:
        try:
            return await db.list_snapshot()
        except Exception:
            logger.exception("Error fetching previous state — treating as empty")
            return []

    @staticmethod
    def compare(
        previous: Iterable[CanonicalSlot],
        current: Iterable[CanonicalSlot],
    ) -> list[TransitionSlot]:
        """Return current slots that were fully booked in *previous* and now have space."""
        previous_by_key: dict[SlotKey, CanonicalSlot] = {slot.key: slot for slot in previous}

        transitions: list[TransitionSlot] = []
        emitted: set[SlotKey] = set()
        for slot in current:
            before = previous_by_key.get(slot.key)
            if before is None or slot.key in emitted:
                continue
            if before.spaces == 0 and slot.spaces > 0:
                emitted.add(slot.key)
                transitions.append(
                    TransitionSlot(
                        date=slot.date,
                        time=slot.time,
                        location=slot.location,
                        spaces=slot.spaces,
                        previous_spaces=before.spaces,
                        current_spaces=slot.spaces,
                    )
                )
        return transitions

    async def update_state(self, current: Iterable[CanonicalSlot]) -> int:
        """
        Persist *current* as the new snapshot, replacing the old one.

        An empty collection still clears the table so past slots never
        linger in the baseline. Errors propagate to the caller.
        """
        slots = validate_slots(current)
        if not slots:
            logger.warning("⚠️  No valid slots to store — clearing snapshot")
        count = await db.replace_snapshot(slots)
        logger.info("✅ Snapshot replaced with %d slots", count)
        return count
