"""
Booking aggregator — one pipeline run over every registered source.

A run:

1.  Fetches all sources concurrently; a failing source contributes
    no slots instead of failing the run.
2.  Merges their slots into one flat collection.
3.  Diffs it against the previous snapshot to find slots that went
    from fully booked to bookable.
4.  Notifies users whose preferences match those slots.
5.  Replaces the snapshot with the current observations.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from courtwatch.models import CanonicalSlot, RunSummary, TransitionSlot
from courtwatch.services.notifier import PreferenceNotifier
from courtwatch.services.slot_source import SlotSource
from courtwatch.services.state_store import SlotStateStore

logger = logging.getLogger(__name__)

_SAMPLE_SIZE = 5


class BookingAggregator:
    """Drives fetch → diff → notify → persist for a fixed set of sources."""

    def __init__(
        self,
        sources: Sequence[SlotSource],
        state_store: SlotStateStore,
        notifier: PreferenceNotifier,
    ) -> None:
        self._sources = list(sources)
        self._state_store = state_store
        self._notifier = notifier
        self._lock = asyncio.Lock()

    @property
    def sources(self) -> list[SlotSource]:
        return list(self._sources)

    async def run(self, days: int | None = None) -> RunSummary:
        """Run the whole pipeline once. Concurrent calls are serialized."""
        if self._lock.locked():
            logger.info("⏳ A pipeline run is already in progress — waiting for it to finish")
        async with self._lock:
            return await self._run(days)

    async def _run(self, days: int | None) -> RunSummary:
        started = datetime.now(timezone.utc)
        logger.info("🚀 Starting booking aggregation (%d sources)", len(self._sources))

        try:
            by_source = await self._fetch_all_sources(days)
            current = [slot for slots in by_source.values() for slot in slots]
            slots_by_source = {name: len(slots) for name, slots in by_source.items()}
            logger.info(
                "📊 Fetched %d slots (%s)",
                len(current),
                ", ".join(f"{name}: {count}" for name, count in slots_by_source.items()),
            )

            previous = await self._state_store.get_previous_state()
            transitions = self._state_store.compare(previous, current)

            notifications_sent = 0
            if transitions:
                self._log_transitions(transitions)
                notifications_sent = await self._notifier.notify(transitions)
            else:
                logger.info("📋 No newly available courts")

            await self._state_store.update_state(current)
        except Exception as exc:
            logger.exception("❌ Booking aggregation failed")
            return RunSummary(success=False, processing_time=started, error=str(exc))

        logger.info(
            "✅ Run complete: %d slots, %d newly available, %d notifications",
            len(current), len(transitions), notifications_sent,
        )
        return RunSummary(
            success=True,
            total_slots=len(current),
            newly_available=len(transitions),
            notifications_sent=notifications_sent,
            processing_time=started,
            slots_by_source=slots_by_source,
            sample_slots=current[:_SAMPLE_SIZE],
        )

    async def _fetch_all_sources(self, days: int | None) -> dict[str, list[CanonicalSlot]]:
        results = await asyncio.gather(
            *(source.fetch_all(days) for source in self._sources),
            return_exceptions=True,
        )

        by_source: dict[str, list[CanonicalSlot]] = {}
        for source, result in zip(self._sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(
                    "❌ Source %s failed: %s", source.name, result,
                    exc_info=(type(result), result, result.__traceback__),
                )
                result = []
            by_source[source.name] = by_source.get(source.name, []) + list(result)
        return by_source

    @staticmethod
    def _log_transitions(transitions: list[TransitionSlot]) -> None:
        lines = [f"🎾 NEWLY AVAILABLE COURTS ({len(transitions)}):"]
        for slot in transitions:
            lines.append(
                f"   {slot.date} {slot.time[:5]} {slot.location} "
                f"({slot.previous_spaces} → {slot.current_spaces} spaces)"
            )
        logger.info("\n".join(lines))
