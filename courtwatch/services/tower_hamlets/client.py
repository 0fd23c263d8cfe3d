from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

import httpx
from bs4 import BeautifulSoup, Tag

from courtwatch.services.tower_hamlets.config import DEFAULT_HEADERS

logger = logging.getLogger(__name__)

_MERIDIEM_RE = re.compile(r"(\d{1,2})\s*(am|pm)", re.IGNORECASE)


@dataclass
class ParsedSession:
    start_time: str  # "HH:MM"
    spaces: int


def parse_meridiem_hour(label: str) -> str | None:
    """Convert an hour label such as "7pm" or "10am" to "HH:00"."""
    match = _MERIDIEM_RE.search(label)
    if match is None:
        return None
    hour = int(match.group(1))
    if not 1 <= hour <= 12:
        return None
    period = match.group(2).lower()
    if period == "pm" and hour != 12:
        hour += 12
    elif period == "am" and hour == 12:
        hour = 0
    return f"{hour:02d}:00"


class TowerHamletsClient:
    """HTTP client for the Tower Hamlets park tennis booking pages.

    Each page shows one venue for one day as a table: one row per hour,
    one checkbox label per court.
    """

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_sessions(self, venue: str, target_date: date) -> list[ParsedSession]:
        url = f"{self._base_url}/{venue}/{target_date.isoformat()}"
        logger.debug("Fetching Tower Hamlets page: %s", url)
        resp = await self._client.get(url)
        resp.raise_for_status()
        return self._parse_html(resp.text)

    # ------------------------------------------------------------------
    # HTML parsing
    # ------------------------------------------------------------------

    def _parse_html(self, html: str) -> list[ParsedSession]:
        soup = BeautifulSoup(html, "html.parser")
        table = soup.select_one("table")
        if table is None:
            logger.warning("⚠️  No availability table found in Tower Hamlets HTML")
            return []

        sessions: list[ParsedSession] = []
        for row in table.select("tr"):
            time_cell = row.select_one("th.time")
            if time_cell is None:
                continue
            start_time = parse_meridiem_hour(time_cell.get_text(strip=True))
            if start_time is None:
                continue

            courts = row.select("label.court")
            spaces = sum(1 for court in courts if not self._is_disabled(court))
            sessions.append(ParsedSession(start_time=start_time, spaces=spaces))

        return sessions

    @staticmethod
    def _is_disabled(court: Tag) -> bool:
        # any occurrence in the label markup counts, e.g. aria-disabled or is-disabled
        return "disabled" in str(court).lower()
