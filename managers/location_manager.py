"""
Location Manager - Resolve a search origin

PURPOSE: Turn a SearchQuery into the Coordinate the search is measured
         from, either by geocoding a ZIP code or by using the device
         position

AVIATION ANALOGY: Like establishing present position before computing
distances - from an entered fix (ZIP) or from the GPS (current location)

Both sources are external collaborators and can fail:
    - GeocodeFailed: the geocoding service gave no usable answer
    - LocationDenied: location access is switched off
    - LocationUnavailable: no position is known

Nothing is retried. The user re-issues the search.
"""

import re
from typing import Any, Dict, Optional

import requests

from database.errors import (
    GeocodeFailed,
    LocationDenied,
    LocationUnavailable,
    QueryError,
)
from database.models import Coordinate, SearchQuery


ZIP_PATTERN = re.compile(r'^\d{5}$')


class ZipGeocoder:
    """
    PURPOSE: Resolve a ZIP code (or free-form address) via Nominatim

    PARAMETERS:
        base_url: Service root, e.g. https://nominatim.openstreetmap.org
        country_codes: Restrict matches (comma-separated ISO codes)
        user_agent: Required by the Nominatim usage policy
        timeout: Seconds before the request is abandoned

    EXAMPLE:
        geocoder = ZipGeocoder()
        coord = geocoder.geocode("53703")
    """

    def __init__(self, base_url: str = 'https://nominatim.openstreetmap.org',
                 country_codes: str = 'us',
                 user_agent: str = 'ClinicFinder/0.1',
                 timeout: float = 10,
                 verbose: bool = False):
        self.base_url = base_url.rstrip('/')
        self.country_codes = country_codes
        self.user_agent = user_agent
        self.timeout = timeout
        self.verbose = verbose

    def _build_params(self, text: str) -> Dict[str, Any]:
        params = {'format': 'json', 'limit': 1}
        if ZIP_PATTERN.match(text):
            params['postalcode'] = text
        else:
            params['q'] = text
        if self.country_codes:
            params['countrycodes'] = self.country_codes
        return params

    def geocode(self, zip_or_address: str) -> Coordinate:
        """
        Resolve text to a coordinate.

        RAISES:
            GeocodeFailed: Network/HTTP error, empty result, bad payload
        """
        text = (zip_or_address or '').strip()
        if not text:
            raise GeocodeFailed(detail="empty ZIP code")

        try:
            response = requests.get(
                f"{self.base_url}/search",
                params=self._build_params(text),
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            places = response.json()
        except requests.RequestException as e:
            if self.verbose:
                print(f"Warning: Geocoding error: {e}")
            raise GeocodeFailed(detail=str(e)) from e
        except ValueError as e:
            # Body was not JSON
            raise GeocodeFailed(detail=f"invalid response: {e}") from e

        if not places:
            if self.verbose:
                print(f"Warning: No location found for {text}")
            raise GeocodeFailed(detail=f"no match for {text}")

        try:
            first = places[0]
            return Coordinate(float(first['lat']), float(first['lon']))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GeocodeFailed(detail=f"unusable coordinates for {text}") from e


class CurrentLocationProvider:
    """
    PURPOSE: Stand-in for the platform location service

    PARAMETERS:
        enabled: False behaves like a denied permission
        position: Last known device position, if any
    """

    def __init__(self, enabled: bool = True, position: Optional[Coordinate] = None):
        self.enabled = enabled
        self.position = position

    def request_current_position(self) -> Coordinate:
        if not self.enabled:
            raise LocationDenied()
        if self.position is None:
            raise LocationUnavailable()
        return self.position


class LocationManager:
    """
    PURPOSE: Pick the right origin source for a query

    EXAMPLE:
        lm = LocationManager.from_settings(settings, here=Coordinate(43.07, -89.40))
        origin = lm.resolve(query)
    """

    def __init__(self, geocoder: ZipGeocoder, current_location: CurrentLocationProvider):
        self.geocoder = geocoder
        self.current_location = current_location

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], here: Optional[Coordinate] = None,
                      verbose: bool = False) -> "LocationManager":
        """
        Build from the finder settings dict.

        here (from --here) takes priority over the configured position.
        """
        geo = settings.get('geocoder') or {}
        geocoder = ZipGeocoder(
            base_url=geo.get('base_url', 'https://nominatim.openstreetmap.org'),
            country_codes=geo.get('country_codes', 'us'),
            user_agent=geo.get('user_agent', 'ClinicFinder/0.1'),
            timeout=geo.get('timeout_seconds', 10),
            verbose=verbose,
        )

        loc = settings.get('location') or {}
        position = here
        if position is None and loc.get('latitude') is not None and loc.get('longitude') is not None:
            try:
                position = Coordinate(float(loc['latitude']), float(loc['longitude']))
            except (TypeError, ValueError) as e:
                raise LocationUnavailable(detail=f"Configured position is invalid: {e}") from e

        provider = CurrentLocationProvider(enabled=loc.get('enabled', True), position=position)
        return cls(geocoder, provider)

    def resolve(self, query: SearchQuery) -> Coordinate:
        """
        Resolve the search origin.

        RAISES:
            QueryError: ZIP mode without a ZIP code
            GeocodeFailed, LocationDenied, LocationUnavailable
        """
        if query.use_current_location:
            return self.current_location.request_current_position()

        if not query.zip_code:
            raise QueryError(user_message="Please enter a ZIP code.")

        return self.geocoder.geocode(query.zip_code)
