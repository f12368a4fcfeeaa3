"""
Clinic Finder Data Model

PURPOSE: Typed records passed between the loader, the search pipeline
         and the presentation layer

AVIATION ANALOGY: Like a waypoint database entry - the fixed facts
(name, position, frequencies) never change, only the computed
distance-to-go is refreshed for each flight plan

All records are frozen dataclasses. The per-search distance is applied
by producing a copy (ClinicRecord.with_distance), so a loaded record
list can be filtered repeatedly without leaking state between searches.
"""

import math
from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Optional
from urllib.parse import urlparse


# Google Maps universal directions link (opens the app or the browser)
DIRECTIONS_URL_TEMPLATE = (
    "https://www.google.com/maps/dir/?api=1"
    "&origin={origin_lat},{origin_lon}"
    "&destination={dest_lat},{dest_lon}"
    "&travelmode=driving"
)


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(
                f"Coordinate must be finite, got ({self.latitude}, {self.longitude})"
            )

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """
        Parse "LAT,LON" text (as typed on the command line).

        EXAMPLE:
            Coordinate.parse("43.0731,-89.4012")
        """
        parts = [part.strip() for part in text.split(',')]
        if len(parts) != 2:
            raise ValueError(f"Expected LAT,LON but got: {text!r}")
        return cls(float(parts[0]), float(parts[1]))

    def __str__(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


@dataclass(frozen=True)
class ClinicRecord:
    """
    PURPOSE: One clinic row from the dataset

    FIELDS:
        name: Clinic display name
        service_tags: Service categories offered (e.g., {"Medical", "Dental"})
        address, phone_number, website_url: Passed through as-is
        coordinate: Clinic position
        distance_miles: Derived per search, 0.0 until a search sets it
    """

    name: str
    service_tags: FrozenSet[str]
    address: str
    phone_number: str
    website_url: str
    coordinate: Coordinate
    distance_miles: float = 0.0

    def with_distance(self, distance_miles: float) -> "ClinicRecord":
        """Return a copy carrying the distance computed for one search."""
        return replace(self, distance_miles=distance_miles)

    # =========================================================================
    # ACTION LINKS - Call / Directions / Website buttons
    # =========================================================================

    def tel_url(self) -> str:
        """Dial link for the clinic phone number."""
        return f"tel://{self.phone_number}"

    def directions_url(self, origin: Coordinate) -> str:
        """Driving directions from origin to this clinic."""
        return DIRECTIONS_URL_TEMPLATE.format(
            origin_lat=origin.latitude,
            origin_lon=origin.longitude,
            dest_lat=self.coordinate.latitude,
            dest_lon=self.coordinate.longitude,
        )

    def has_website(self) -> bool:
        """True when website_url is an absolute http(s) link worth showing."""
        parsed = urlparse(self.website_url.strip())
        return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

    def services_display(self) -> str:
        return ", ".join(sorted(self.service_tags))

    def distance_display(self) -> str:
        return f"{self.distance_miles:.2f} miles"


@dataclass(frozen=True)
class SearchQuery:
    """
    PURPOSE: Everything the user chose on the search screen, in one value

    WHY THIS APPROACH: Passing an immutable query into the pipeline
    (instead of reading toggles and pickers from shared state) means a
    search can be replayed, logged, or run on a worker thread safely.

    An empty service_tags set means "any service".
    """

    radius_miles: float
    service_tags: FrozenSet[str] = frozenset()
    zip_code: Optional[str] = None
    use_current_location: bool = False

    def describe(self) -> str:
        """Short human-readable summary (used in headers and exports)."""
        origin = "current location" if self.use_current_location else f"ZIP {self.zip_code}"
        services = ", ".join(sorted(self.service_tags)) if self.service_tags else "any service"
        return f"Within {self.radius_miles:g} miles of {origin} - {services}"


@dataclass
class LoadReport:
    """
    Bookkeeping for one dataset load.

    skipped holds (line_number, reason) for every dropped row. Line
    numbers are 1-based and count the header as line 1.
    """

    rows_read: int = 0
    skipped: List[tuple] = field(default_factory=list)

    @property
    def rows_loaded(self) -> int:
        return self.rows_read - len(self.skipped)

    def skip(self, line_number: int, reason: str) -> None:
        self.skipped.append((line_number, reason))


@dataclass(frozen=True)
class SearchResult:
    """Ordered search output handed back to the presentation layer."""

    query: SearchQuery
    origin: Coordinate
    clinics: tuple = ()

    @property
    def count(self) -> int:
        return len(self.clinics)

    def is_empty(self) -> bool:
        return not self.clinics
