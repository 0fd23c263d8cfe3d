"""
Abstract interface for booking-provider integrations.

Every provider adapter implements this protocol so the aggregator is
decoupled from the provider's wire format.
"""

from __future__ import annotations

from typing import Protocol

from courtwatch.models import CanonicalSlot


class SlotSource(Protocol):
    """Protocol that every provider adapter must satisfy."""

    @property
    def name(self) -> str:
        """Short identifier used in logs and run summaries."""
        ...

    async def fetch_all(self, days: int | None = None) -> list[CanonicalSlot]:
        """
        Return canonical slots for every configured venue over the next
        *days* days (the adapter's own default window when None).
        """
        ...
