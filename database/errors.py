"""
Clinic Finder Errors

PURPOSE: One exception hierarchy for every failure that aborts a search

R EQUIVALENT: Like rlang::abort() with a custom condition class, so
callers can tryCatch() on the class instead of matching message text

Each error carries a short user_message suitable for the CLI, plus an
optional detail string with the underlying cause (path, HTTP status, ...).

NOTE: Malformed dataset rows are NOT errors. They are skipped by the
loader and recorded in a LoadReport instead.
"""

from typing import Optional


class ClinicFinderError(Exception):
    """Base class for all search-aborting failures."""

    default_message = "Search failed."

    def __init__(self, detail: Optional[str] = None, user_message: Optional[str] = None):
        self.user_message = user_message or self.default_message
        self.detail = detail
        if detail:
            super().__init__(f"{self.user_message} ({detail})")
        else:
            super().__init__(self.user_message)


# =============================================================================
# RESOURCE ERRORS - the bundled dataset
# =============================================================================

class ResourceNotFound(ClinicFinderError):
    """Dataset file is missing."""
    default_message = "CSV file not found."


class ResourceUnreadable(ClinicFinderError):
    """Dataset file exists but could not be read or decoded."""
    default_message = "Failed to read CSV file."


# =============================================================================
# LOCATION ERRORS - geocoding and device position
# =============================================================================

class GeocodeFailed(ClinicFinderError):
    """ZIP code or address could not be resolved to a coordinate."""
    default_message = "Failed to get location for ZIP code."


class LocationDenied(ClinicFinderError):
    default_message = "Location access is denied. Please enable it in settings."


class LocationUnavailable(ClinicFinderError):
    default_message = "Unable to get current location."


# =============================================================================
# INPUT ERRORS
# =============================================================================

class QueryError(ClinicFinderError):
    """Search input is incomplete or out of range."""
    default_message = "Invalid search."
