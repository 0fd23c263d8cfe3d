"""
LTA ClubSpark integration configuration.

ClubSpark reports one session list per physical court; we aggregate
all courts of a venue into one location keyed by the venue id.
"""

from __future__ import annotations

from dataclasses import dataclass

from courtwatch.services.canonical import DEFAULT_TIMEZONE, OperatingHours

SOURCE_NAME = "lta"

DEFAULT_FETCH_DAYS = 7

# Session capacity flag: 1 = court free, 0 = booked.
CAPACITY_AVAILABLE = 1

DEFAULT_HEADERS: dict[str, str] = {
    "accept": "application/json",
    "accept-language": "en-GB,en;q=0.9",
    "cache-control": "no-cache",
    "pragma": "no-cache",
    "user-agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/137.0.0.0 Safari/537.36"
    ),
}


@dataclass(frozen=True)
class LtaVenueConfig:
    id: str
    name: str
    venue: str  # ClubSpark venue slug, e.g. "FinsburyPark"
    display_name: str
    operating_hours: OperatingHours
    timezone: str = DEFAULT_TIMEZONE
    slot_duration_minutes: int = 60


LTA_VENUES: tuple[LtaVenueConfig, ...] = (
    LtaVenueConfig(
        id="finsbury-park",
        name="Finsbury Park",
        venue="FinsburyPark",
        display_name="Finsbury Park Tennis",
        operating_hours=OperatingHours(start="07:00", end="22:00"),
    ),
)


def find_venue(venue_id: str, venues: tuple[LtaVenueConfig, ...] = LTA_VENUES) -> LtaVenueConfig | None:
    for venue in venues:
        if venue.id == venue_id:
            return venue
    return None
