"""
Low-level HTTP client for the Better activity-times API.

Handles request construction and decoding of the three response shapes
the endpoint is known to return.
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Any

import httpx

from courtwatch.services.better.config import DEFAULT_HEADERS

logger = logging.getLogger(__name__)


class PayloadShape(enum.Enum):
    DATA_LIST = "data-list"  # {"data": [...]} (future dates)
    DATA_MAP = "data-map"  # {"data": {"4": {...}, ...}} (today, some times past)
    ROOT_LIST = "root-list"  # [...]
    UNKNOWN = "unknown"


def decode_payload(payload: Any) -> tuple[PayloadShape, list[Any]]:
    """Classify *payload* and coerce it to a list of raw slot records."""
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return PayloadShape.DATA_LIST, list(data)
        if isinstance(data, dict):
            return PayloadShape.DATA_MAP, list(data.values())
    elif isinstance(payload, list):
        return PayloadShape.ROOT_LIST, list(payload)
    return PayloadShape.UNKNOWN, []


class BetterClient:
    """Async HTTP client for the Better admin API."""

    def __init__(self, api_url: str, bookings_url: str = "", timeout: float = 30.0) -> None:
        self._api_url = api_url.rstrip("/")
        self._bookings_url = bookings_url.rstrip("/")
        headers = dict(DEFAULT_HEADERS)
        if self._bookings_url:
            headers["origin"] = self._bookings_url
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_booking_times(
        self,
        venue: str,
        activity: str,
        target_date: date,
    ) -> list[Any]:
        """Fetch the raw slot records for one venue/activity/date."""
        date_str = target_date.isoformat()
        url = f"{self._api_url}/activities/venue/{venue}/activity/{activity}/times"
        headers = {}
        if self._bookings_url:
            headers["referer"] = f"{self._bookings_url}/location/{venue}/{activity}/{date_str}/by-time"

        logger.debug("Fetching Better times: %s date=%s", url, date_str)
        resp = await self._client.get(url, params={"date": date_str}, headers=headers)
        resp.raise_for_status()

        shape, records = decode_payload(resp.json())
        if shape is PayloadShape.UNKNOWN:
            logger.warning(
                "⚠️  Unexpected Better response format for %s/%s on %s", venue, activity, date_str
            )
        else:
            logger.debug(
                "Better %s/%s on %s: %d records (%s)", venue, activity, date_str, len(records), shape.value
            )
        return records
