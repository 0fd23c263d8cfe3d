"""
Better integration configuration.

Venues and the tennis activities bookable at each of them, with the
hours during which slots are considered real (the upstream sometimes
lists placeholder times outside opening hours).
"""

from __future__ import annotations

from dataclasses import dataclass

from courtwatch.services.canonical import DEFAULT_TIMEZONE, OperatingHours

SOURCE_NAME = "better"

# Number of days (including today) fetched per run when not overridden.
DEFAULT_FETCH_DAYS = 6

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
class ActivityConfig:
    id: str
    name: str
    activity: str  # Better activity slug
    display_name: str
    operating_hours: OperatingHours


@dataclass(frozen=True)
class VenueConfig:
    id: str
    name: str
    venue: str  # Better venue slug
    activities: tuple[ActivityConfig, ...]
    timezone: str = DEFAULT_TIMEZONE


@dataclass(frozen=True)
class VenueActivity:
    """One (venue, activity) pair the adapter polls."""

    venue: VenueConfig
    activity: ActivityConfig

    @property
    def location_id(self) -> str:
        return f"{self.venue.id}/{self.activity.id}"


def _activity(
    activity_id: str, name: str, display_name: str, start: str, end: str
) -> ActivityConfig:
    return ActivityConfig(
        id=activity_id,
        name=name,
        activity=activity_id,
        display_name=display_name,
        operating_hours=OperatingHours(start=start, end=end),
    )


BETTER_VENUES: tuple[VenueConfig, ...] = (
    VenueConfig(
        id="islington-tennis-centre",
        name="Islington Tennis Centre",
        venue="islington-tennis-centre",
        activities=(
            _activity("highbury-tennis", "Highbury Tennis", "Highbury Tennis (Outdoor)", "07:00", "21:00"),
            _activity("tennis-court-indoor", "Indoor Tennis", "Tennis Court (Indoor)", "07:00", "23:00"),
            _activity("tennis-court-outdoor", "Outdoor Tennis", "Tennis Court (Outdoor)", "07:00", "23:00"),
            _activity("rosemary-gardens-tennis", "Rosemary Gardens Tennis", "Rosemary Gardens Tennis", "08:00", "22:00"),
            _activity("tufnell-park-tennis", "Tufnell Park Tennis", "Tufnell Park Tennis", "08:00", "21:00"),
        ),
    ),
    VenueConfig(
        id="lee-valley-hockey-and-tennis-centre",
        name="Lee Valley Hockey and Tennis Centre",
        venue="lee-valley-hockey-and-tennis-centre",
        activities=(
            _activity("tennis-court-indoor", "Indoor Tennis", "Tennis Court (Indoor)", "07:00", "23:00"),
        ),
    ),
    VenueConfig(
        id="gunnersbury-park-sports-hub",
        name="Gunnersbury Park Sports Hub",
        venue="gunnersbury-park-sports-hub",
        activities=(
            _activity("tennis-court-outdoor", "Outdoor Tennis", "Tennis Court (Outdoor)", "07:00", "22:00"),
        ),
    ),
)


def venue_activities(venues: tuple[VenueConfig, ...] = BETTER_VENUES) -> list[VenueActivity]:
    return [VenueActivity(venue, activity) for venue in venues for activity in venue.activities]


def find_venue_activity(
    location_id: str, venues: tuple[VenueConfig, ...] = BETTER_VENUES
) -> VenueActivity | None:
    for pair in venue_activities(venues):
        if pair.location_id == location_id:
            return pair
    return None
