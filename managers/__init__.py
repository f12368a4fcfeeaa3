"""
Managers package for Clinic Finder

Provides specialized managers for:
- Search origin resolution (ZIP geocoding, current location)
- Distance filtering/sorting and search orchestration
"""

from .location_manager import LocationManager, ZipGeocoder, CurrentLocationProvider
from .search_manager import (
    SearchManager,
    SearchSession,
    SearchOutcome,
    build_query,
    filter_and_sort,
)

__all__ = [
    'LocationManager', 'ZipGeocoder', 'CurrentLocationProvider',
    'SearchManager', 'SearchSession', 'SearchOutcome',
    'build_query', 'filter_and_sort',
]
