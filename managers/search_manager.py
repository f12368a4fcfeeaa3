"""
Search Manager - Distance filter/sort and search orchestration

PURPOSE: Find the clinics within a radius of an origin that offer at
         least one of the requested services, nearest first

R EQUIVALENT: Like
    clinics |>
      mutate(distance = geosphere::distHaversine(origin, coords) / 1609.34) |>
      filter(distance <= radius, map_lgl(services, ~ any(.x %in% wanted))) |>
      arrange(distance)

AVIATION ANALOGY: Like listing alternate airports within range that
have the services you need (fuel, customs), closest first

PIPELINE:
    SearchQuery -> LocationManager.resolve() -> origin
                -> ClinicDataset.load()      -> records (fresh each search)
                -> filter_and_sort()         -> SearchResult

SearchSession adds a generation token so that when searches overlap,
only the answer to the latest one is kept.
"""

import math
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from database.clinic_dataset import ClinicDataset
from database.errors import ClinicFinderError, QueryError
from database.models import ClinicRecord, Coordinate, SearchQuery, SearchResult
from managers.location_manager import LocationManager


# ============================================================================
# DISTANCE
# ============================================================================

METERS_PER_MILE = 1609.34

# Mean Earth radius (IUGG), meters
EARTH_RADIUS_METERS = 6371008.8

ZIP_CODE_LENGTH = 5


def great_circle_meters(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates, in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    # Clamp guards asin against h drifting past 1.0 for antipodal points
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    return great_circle_meters(a, b) / METERS_PER_MILE


def matches_services(clinic: ClinicRecord, wanted: Iterable[str]) -> bool:
    """Empty wanted set means any service; otherwise at least one overlap."""
    wanted = frozenset(wanted)
    return not wanted or not clinic.service_tags.isdisjoint(wanted)


def filter_and_sort(origin: Coordinate, radius_miles: float,
                    service_tags: Iterable[str],
                    clinics: Sequence[ClinicRecord]) -> List[ClinicRecord]:
    """
    Core filter/sort step.

    PARAMETERS:
        origin: Reference coordinate
        radius_miles: Inclusive radius
        service_tags: Wanted services (empty = any)
        clinics: Records to search (left untouched)

    RETURNS:
        New records with distance_miles set, nearest first
    """
    if not math.isfinite(radius_miles) or radius_miles < 0:
        raise ValueError(f"Radius must be a non-negative number: {radius_miles}")

    wanted = frozenset(service_tags)
    matches = []

    for clinic in clinics:
        miles = distance_miles(origin, clinic.coordinate)
        if not miles <= radius_miles:
            continue
        if not matches_services(clinic, wanted):
            continue
        matches.append(clinic.with_distance(miles))

    matches.sort(key=lambda c: c.distance_miles)
    return matches


# ============================================================================
# QUERY BUILDING
# ============================================================================

def build_query(radius_miles: float, services: Iterable[str] = (),
                zip_code: Optional[str] = None,
                use_current_location: bool = False,
                distance_options: Optional[Sequence[float]] = None) -> SearchQuery:
    """
    Validate raw input and build a SearchQuery.

    - ZIP input keeps its first five characters (the input box limit)
    - With distance_options, the radius must be one of them

    RAISES:
        QueryError: No ZIP in ZIP mode, or radius out of range
    """
    if not math.isfinite(radius_miles) or radius_miles < 0:
        raise QueryError(user_message=f"Radius must be a non-negative number: {radius_miles:g}")

    if distance_options and radius_miles not in distance_options:
        choices = ", ".join(f"{d:g}" for d in distance_options)
        raise QueryError(user_message=f"Radius must be one of: {choices} miles")

    if not use_current_location:
        zip_code = (zip_code or '').strip()[:ZIP_CODE_LENGTH]
        if not zip_code:
            raise QueryError(user_message="Please enter a ZIP code.")
    else:
        zip_code = None

    tags = frozenset(s.strip() for s in services if s and s.strip())

    return SearchQuery(
        radius_miles=float(radius_miles),
        service_tags=tags,
        zip_code=zip_code,
        use_current_location=use_current_location,
    )


# ============================================================================
# SEARCH MANAGER
# ============================================================================

class SearchManager:
    """
    PURPOSE: Run one complete search

    PARAMETERS:
        dataset: ClinicDataset to read for every search
        location_manager: Resolves the search origin

    EXAMPLE:
        sm = SearchManager(ClinicDataset(), LocationManager.from_settings(settings))
        result = sm.search(build_query(10, ["Dental"], zip_code="53703"))
        for clinic in result.clinics:
            print(clinic.name, clinic.distance_display())
    """

    def __init__(self, dataset: ClinicDataset, location_manager: LocationManager):
        self.dataset = dataset
        self.location_manager = location_manager

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], dataset_path: Optional[str] = None,
                      here: Optional[Coordinate] = None,
                      verbose: bool = False) -> "SearchManager":
        dataset = ClinicDataset(dataset_path or settings.get('dataset_path'), verbose=verbose)
        location_manager = LocationManager.from_settings(settings, here=here, verbose=verbose)
        return cls(dataset, location_manager)

    def search(self, query: SearchQuery) -> SearchResult:
        """
        Resolve origin, load, filter and sort.

        Origin is resolved first so a bad ZIP fails before any file I/O.

        RAISES:
            ClinicFinderError subclasses (resource or location failures)
        """
        origin = self.location_manager.resolve(query)
        clinics = self.dataset.load()
        matches = filter_and_sort(origin, query.radius_miles, query.service_tags, clinics)
        return SearchResult(query=query, origin=origin, clinics=tuple(matches))


# ============================================================================
# SEARCH SESSION - overlapping searches
# ============================================================================

@dataclass(frozen=True)
class SearchOutcome:
    """What one submitted search produced, and whether it was kept."""

    token: int
    result: Optional[SearchResult] = None
    error: Optional[ClinicFinderError] = None
    applied: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None


class SearchSession:
    """
    PURPOSE: Run searches in the background, keeping only the newest

    Every submit() bumps a generation token. When a search finishes,
    its outcome is applied only if its token is still the current one;
    an answer to a superseded search is discarded.

    EXAMPLE:
        with SearchSession(manager) as session:
            token, future = session.submit(query)
            outcome = future.result()
            if outcome.applied:
                show(outcome.result)
    """

    def __init__(self, manager: SearchManager, max_workers: int = 2):
        self.manager = manager
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[SearchOutcome] = None

    @property
    def current_token(self) -> int:
        with self._lock:
            return self._generation

    def submit(self, query: SearchQuery) -> Tuple[int, Future]:
        """Start a search. Returns (token, future of SearchOutcome)."""
        with self._lock:
            self._generation += 1
            token = self._generation
        return token, self._executor.submit(self._run, token, query)

    def _run(self, token: int, query: SearchQuery) -> SearchOutcome:
        try:
            result = self.manager.search(query)
            error = None
        except ClinicFinderError as e:
            result = None
            error = e

        with self._lock:
            applied = token == self._generation
            outcome = SearchOutcome(token=token, result=result, error=error, applied=applied)
            if applied:
                self._latest = outcome
        return outcome

    def latest(self) -> Optional[SearchOutcome]:
        """Most recent applied outcome, or None if nothing has finished."""
        with self._lock:
            return self._latest

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
