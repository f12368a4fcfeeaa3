"""
Database package for Clinic Finder

Provides the clinic data model, the error hierarchy, and ClinicDataset
for loading the bundled read-only clinic CSV.
"""

from .clinic_dataset import ClinicDataset, parse_clinic_csv, DEFAULT_DATASET_PATH
from .errors import (
    ClinicFinderError,
    ResourceNotFound,
    ResourceUnreadable,
    GeocodeFailed,
    LocationDenied,
    LocationUnavailable,
    QueryError,
)
from .models import ClinicRecord, Coordinate, LoadReport, SearchQuery, SearchResult

__all__ = [
    'ClinicDataset', 'parse_clinic_csv', 'DEFAULT_DATASET_PATH',
    'ClinicFinderError', 'ResourceNotFound', 'ResourceUnreadable',
    'GeocodeFailed', 'LocationDenied', 'LocationUnavailable', 'QueryError',
    'ClinicRecord', 'Coordinate', 'LoadReport', 'SearchQuery', 'SearchResult',
]
