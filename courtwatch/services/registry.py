"""
Source registry – holds every integrated booking provider.

Owns the adapters and their HTTP clients and builds the aggregator
that runs them. Initialized once at application startup.
"""

from __future__ import annotations

import logging
from typing import Protocol

from courtwatch import config
from courtwatch.services.aggregator import BookingAggregator
from courtwatch.services.better.client import BetterClient
from courtwatch.services.better.service import BetterSource
from courtwatch.services.lta.client import LtaClient
from courtwatch.services.lta.service import LtaSource
from courtwatch.services.notifier import notifier
from courtwatch.services.slot_source import SlotSource
from courtwatch.services.state_store import SlotStateStore
from courtwatch.services.tower_hamlets.client import TowerHamletsClient
from courtwatch.services.tower_hamlets.service import TowerHamletsSource

logger = logging.getLogger(__name__)


class _Closeable(Protocol):
    async def close(self) -> None: ...


class SourceRegistry:
    """
    Registry of all integrated slot sources.

    A source is only registered when its upstream URL is configured, so
    a partially configured deployment still runs with what it has.
    """

    def __init__(self) -> None:
        self._sources: dict[str, SlotSource] = {}
        self._clients: list[_Closeable] = []
        self._aggregator: BookingAggregator | None = None

    def register_better(self) -> None:
        if not config.BETTER_ADMIN_API_URL:
            logger.warning("⚠️  BETTER_ADMIN_API_URL not set — Better source disabled")
            return
        client = BetterClient(
            config.BETTER_ADMIN_API_URL,
            config.BETTER_BOOKINGS_URL,
            timeout=config.HTTP_TIMEOUT,
        )
        self.register(
            BetterSource(
                client,
                days=config.PIPELINE_DAYS,
                request_delay=config.BETTER_REQUEST_DELAY,
            ),
            client,
        )

    def register_lta(self) -> None:
        if not config.LTA_BOOKINGS_URL:
            logger.warning("⚠️  LTA_BOOKINGS_URL not set — LTA source disabled")
            return
        client = LtaClient(config.LTA_BOOKINGS_URL, timeout=config.HTTP_TIMEOUT)
        self.register(LtaSource(client), client)

    def register_tower_hamlets(self) -> None:
        if not config.TOWER_HAMLETS_BOOKINGS_URL:
            logger.warning("⚠️  TOWER_HAMLETS_BOOKINGS_URL not set — Tower Hamlets source disabled")
            return
        client = TowerHamletsClient(config.TOWER_HAMLETS_BOOKINGS_URL, timeout=config.HTTP_TIMEOUT)
        self.register(TowerHamletsSource(client), client)

    def register(self, source: SlotSource, client: _Closeable | None = None) -> None:
        """Register *source* (and the client to close on shutdown)."""
        self._sources[source.name] = source
        if client is not None:
            self._clients.append(client)
        self._aggregator = None
        logger.info("Registered slot source %s", source.name)

    def register_all(self) -> None:
        self.register_better()
        self.register_lta()
        self.register_tower_hamlets()

    async def start(self) -> None:
        """Register every configured provider."""
        self.register_all()
        logger.info("Source registry started with %d sources", len(self._sources))

    async def stop(self) -> None:
        """Close all HTTP clients and forget the registered sources."""
        for client in self._clients:
            await client.close()
        self._clients.clear()
        self._sources.clear()
        self._aggregator = None

    def get_source(self, name: str) -> SlotSource | None:
        return self._sources.get(name)

    def list_sources(self) -> list[str]:
        return list(self._sources)

    def get_aggregator(self) -> BookingAggregator:
        """Return the aggregator over the registered sources, building it on first use."""
        if self._aggregator is None:
            self._aggregator = BookingAggregator(
                list(self._sources.values()), SlotStateStore(), notifier
            )
        return self._aggregator


# ── Singleton instance ────────────────────────────────────────────────────
registry = SourceRegistry()
