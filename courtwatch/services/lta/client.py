"""
Low-level HTTP client for the ClubSpark venue-sessions endpoint.

One request returns every court of a venue for a whole date range.
"""

from __future__ import annotations

import logging
import time
from datetime import date

import httpx

from courtwatch.services.lta.api_models import LtaVenueSessions
from courtwatch.services.lta.config import DEFAULT_HEADERS

logger = logging.getLogger(__name__)


class LtaClient:
    """Async HTTP client for LTA ClubSpark."""

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(headers=DEFAULT_HEADERS, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_venue_sessions(
        self,
        venue: str,
        start_date: date,
        end_date: date,
    ) -> LtaVenueSessions:
        url = f"{self._base_url}/{venue}/GetVenueSessions"
        params = {
            "resourceID": "",
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "roleId": "",
            "_": str(int(time.time() * 1000)),  # cache buster
        }
        logger.debug("Fetching LTA sessions: %s %s", url, params)
        resp = await self._client.get(url, params=params)
        resp.raise_for_status()

        sessions = LtaVenueSessions.model_validate(resp.json())
        logger.debug("LTA %s: %d resources", venue, len(sessions.Resources))
        return sessions
