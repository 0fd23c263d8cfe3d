from __future__ import annotations

from dataclasses import dataclass

from courtwatch.services.canonical import DEFAULT_TIMEZONE, OperatingHours

SOURCE_NAME = "tower-hamlets"

DEFAULT_FETCH_DAYS = 7

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; CourtWatch/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-GB,en;q=0.5",
}

# Park courts are bookable on the hour only.
_PARK_HOURS = OperatingHours(start="07:00", end="22:00")


@dataclass(frozen=True)
class TowerHamletsVenueConfig:
    id: str
    name: str
    venue: str  # URL slug
    display_name: str
    operating_hours: OperatingHours = _PARK_HOURS
    timezone: str = DEFAULT_TIMEZONE


def _park(slug: str, name: str, display_name: str) -> TowerHamletsVenueConfig:
    return TowerHamletsVenueConfig(id=slug, name=name, venue=slug, display_name=display_name)


TOWER_HAMLETS_VENUES: tuple[TowerHamletsVenueConfig, ...] = (
    _park("bethnal-green-gardens", "Bethnal Green Gardens", "Bethnal Green Gardens Tennis"),
    _park("king-edward-memorial-park", "King Edward Memorial Park", "King Edward Memorial Park Tennis"),
    _park("poplar-rec-ground", "Poplar Rec Ground", "Poplar Recreation Ground Tennis"),
    _park("ropemakers-field", "Ropemakers Field", "Ropemakers Field Tennis"),
    _park("st-johns-park", "St Johns Park", "St Johns Park Tennis"),
    _park("victoria-park", "Victoria Park", "Victoria Park Tennis"),
    _park("wapping-gardens", "Wapping Gardens", "Wapping Gardens Tennis"),
)


def find_venue(
    venue_id: str, venues: tuple[TowerHamletsVenueConfig, ...] = TOWER_HAMLETS_VENUES
) -> TowerHamletsVenueConfig | None:
    for venue in venues:
        if venue.id == venue_id:
            return venue
    return None
