"""
Deep links to the provider page where a slot can be booked.

A location key is resolved against the three venue catalogs to find
which provider it belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass

from courtwatch import config
from courtwatch.services.better import config as better_config
from courtwatch.services.lta import config as lta_config
from courtwatch.services.tower_hamlets import config as th_config

PROVIDER_LABELS: dict[str, str] = {
    better_config.SOURCE_NAME: "Better",
    lta_config.SOURCE_NAME: "LTA ClubSpark",
    th_config.SOURCE_NAME: "Tower Hamlets",
}


@dataclass(frozen=True)
class BookingLink:
    url: str
    provider: str  # source name, or "unknown"

    @property
    def label(self) -> str:
        return PROVIDER_LABELS.get(self.provider, "Booking")


def provider_for(location: str) -> str:
    if better_config.find_venue_activity(location) is not None:
        return better_config.SOURCE_NAME
    if lta_config.find_venue(location) is not None:
        return lta_config.SOURCE_NAME
    if th_config.find_venue(location) is not None:
        return th_config.SOURCE_NAME
    return "unknown"


def booking_link(location: str, date: str, time: str) -> BookingLink:
    """Build the booking URL for a slot; empty when the provider URL is unknown."""
    provider = provider_for(location)

    if provider == better_config.SOURCE_NAME:
        pair = better_config.find_venue_activity(location)
        if not config.BETTER_BOOKINGS_URL:
            return BookingLink("", provider)
        start = time[:5]
        end = f"{int(time[:2]) + 1:02d}:00"
        url = (
            f"{config.BETTER_BOOKINGS_URL}/location/{pair.venue.venue}/{pair.activity.activity}"
            f"/{date}/by-time/slot/{start}-{end}"
        )
        return BookingLink(url, provider)

    if provider == lta_config.SOURCE_NAME:
        venue = lta_config.find_venue(location)
        return BookingLink(f"{config.LTA_BOOKINGS_URL}/{venue.venue}/Booking/BookByDate#?date={date}", provider)

    if provider == th_config.SOURCE_NAME:
        if not config.TOWER_HAMLETS_BOOKINGS_URL:
            return BookingLink("", provider)
        venue = th_config.find_venue(location)
        return BookingLink(f"{config.TOWER_HAMLETS_BOOKINGS_URL}/{venue.venue}/{date}", provider)

    return BookingLink("", provider)


def format_location_name(location: str) -> str:
    """"islington-tennis-centre/highbury-tennis" → "Islington Tennis Centre / Highbury Tennis"."""
    return " / ".join(
        " ".join(word.capitalize() for word in part.split("-"))
        for part in location.split("/")
    )
