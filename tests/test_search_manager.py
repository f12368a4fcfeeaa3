"""
Unit Tests for the Search Manager

PURPOSE: Test great-circle distance, radius/service filtering,
         ordering, query validation, and overlapping searches

R EQUIVALENT: Like testthat for R - structured unit tests

RUN TESTS:
    python3 -m pytest tests/ -v
    OR
    python3 tests/test_search_manager.py
"""

import math
import os
import sys
import threading
import unittest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database.clinic_dataset import ClinicDataset
from database.errors import LocationUnavailable, QueryError, ResourceNotFound
from database.models import ClinicRecord, Coordinate, SearchQuery, SearchResult
from managers.location_manager import CurrentLocationProvider, LocationManager, ZipGeocoder
from managers.search_manager import (
    EARTH_RADIUS_METERS,
    METERS_PER_MILE,
    SearchManager,
    SearchSession,
    build_query,
    distance_miles,
    filter_and_sort,
    great_circle_meters,
)


ORIGIN = Coordinate(43.0731, -89.4012)  # Madison, WI


def north_of(origin, miles):
    """Coordinate exactly `miles` due north of origin on the model sphere."""
    degrees = math.degrees(miles * METERS_PER_MILE / EARTH_RADIUS_METERS)
    return Coordinate(origin.latitude + degrees, origin.longitude)


def make_clinic(name, coordinate, tags=("Medical",)):
    return ClinicRecord(
        name=name,
        service_tags=frozenset(tags),
        address=f"{name} address",
        phone_number="608-555-0100",
        website_url="https://www.example.org",
        coordinate=coordinate,
    )


class TestGreatCircleDistance(unittest.TestCase):
    """Haversine distance and the meters-to-miles conversion."""

    def test_same_point_is_zero(self):
        self.assertEqual(great_circle_meters(ORIGIN, ORIGIN), 0.0)

    def test_meridian_distance(self):
        self.assertAlmostEqual(distance_miles(ORIGIN, north_of(ORIGIN, 3.0)), 3.0, places=6)

    def test_symmetric(self):
        other = Coordinate(43.0389, -87.9065)  # Milwaukee
        self.assertAlmostEqual(distance_miles(ORIGIN, other),
                               distance_miles(other, ORIGIN), places=9)

    def test_madison_to_milwaukee(self):
        """Roughly 75 miles straight-line."""
        miles = distance_miles(ORIGIN, Coordinate(43.0389, -87.9065))
        self.assertGreater(miles, 70)
        self.assertLess(miles, 80)

    def test_one_degree_of_latitude(self):
        meters = great_circle_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
        self.assertAlmostEqual(meters, EARTH_RADIUS_METERS * math.pi / 180, places=3)

    def test_antipodal_points(self):
        meters = great_circle_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 180.0))
        self.assertAlmostEqual(meters, EARTH_RADIUS_METERS * math.pi, places=3)


class TestFilterAndSort(unittest.TestCase):
    """Radius filter, service overlap filter, and ordering."""

    def setUp(self):
        self.near = make_clinic("Near", north_of(ORIGIN, 1.5))
        self.mid = make_clinic("Mid", north_of(ORIGIN, 3.0))
        self.far = make_clinic("Far", north_of(ORIGIN, 12.0))

    def test_sorted_by_distance(self):
        """3.0 and 1.5 mile records inside radius 5 come back [1.5, 3.0]."""
        result = filter_and_sort(ORIGIN, 5, set(), [self.mid, self.near])
        self.assertEqual([c.name for c in result], ["Near", "Mid"])
        self.assertAlmostEqual(result[0].distance_miles, 1.5, places=6)
        self.assertAlmostEqual(result[1].distance_miles, 3.0, places=6)

    def test_radius_excludes_far(self):
        result = filter_and_sort(ORIGIN, 5, set(), [self.far, self.mid, self.near])
        self.assertNotIn("Far", [c.name for c in result])
        for clinic in result:
            self.assertLessEqual(clinic.distance_miles, 5)

    def test_radius_is_inclusive(self):
        here = make_clinic("Here", ORIGIN)
        result = filter_and_sort(ORIGIN, 0, set(), [here])
        self.assertEqual([c.name for c in result], ["Here"])

    def test_just_inside_and_outside(self):
        inside = make_clinic("Inside", north_of(ORIGIN, 4.999))
        outside = make_clinic("Outside", north_of(ORIGIN, 5.001))
        result = filter_and_sort(ORIGIN, 5, set(), [inside, outside])
        self.assertEqual([c.name for c in result], ["Inside"])

    def test_service_overlap(self):
        """{"Dental"} excludes Medical-only, includes Medical+Dental."""
        medical = make_clinic("Medical Only", north_of(ORIGIN, 1), ["Medical"])
        both = make_clinic("Both", north_of(ORIGIN, 2), ["Medical", "Dental"])
        result = filter_and_sort(ORIGIN, 5, {"Dental"}, [medical, both])
        self.assertEqual([c.name for c in result], ["Both"])

    def test_any_of_several_wanted(self):
        pharmacy = make_clinic("Pharmacy", north_of(ORIGIN, 1), ["Pharmacy"])
        dental = make_clinic("Dental", north_of(ORIGIN, 2), ["Dental"])
        pt = make_clinic("PT", north_of(ORIGIN, 3), ["Physical Therapy"])
        result = filter_and_sort(ORIGIN, 5, {"Dental", "Pharmacy"}, [pt, dental, pharmacy])
        self.assertEqual([c.name for c in result], ["Pharmacy", "Dental"])

    def test_empty_tags_means_any(self):
        dental = make_clinic("Dental", north_of(ORIGIN, 2), ["Dental"])
        result = filter_and_sort(ORIGIN, 5, set(), [self.near, dental, self.far])
        self.assertEqual([c.name for c in result], ["Near", "Dental"])

    def test_inputs_not_modified(self):
        clinics = [self.mid, self.near]
        filter_and_sort(ORIGIN, 5, set(), clinics)
        self.assertEqual([c.name for c in clinics], ["Mid", "Near"])
        self.assertEqual(self.mid.distance_miles, 0.0)

    def test_distance_recomputed_per_search(self):
        first = filter_and_sort(ORIGIN, 5, set(), [self.mid])
        second = filter_and_sort(north_of(ORIGIN, 1.0), 5, set(), [self.mid])
        self.assertAlmostEqual(first[0].distance_miles, 3.0, places=6)
        self.assertAlmostEqual(second[0].distance_miles, 2.0, places=6)

    def test_negative_radius_rejected(self):
        with self.assertRaises(ValueError):
            filter_and_sort(ORIGIN, -1, set(), [self.near])

    def test_non_finite_radius_rejected(self):
        far_away = make_clinic("Milwaukee", north_of(ORIGIN, 75.0))
        for radius in (float('nan'), float('inf')):
            with self.assertRaises(ValueError):
                filter_and_sort(ORIGIN, radius, set(), [self.near, far_away])

    def test_no_clinics(self):
        self.assertEqual(filter_and_sort(ORIGIN, 5, set(), []), [])


class TestBuildQuery(unittest.TestCase):
    """Input validation from the search screen."""

    def test_zip_query(self):
        query = build_query(10, ["Dental", " Medical "], zip_code="53703")
        self.assertEqual(query.zip_code, "53703")
        self.assertFalse(query.use_current_location)
        self.assertEqual(query.radius_miles, 10.0)
        self.assertEqual(query.service_tags, frozenset({"Dental", "Medical"}))

    def test_zip_truncated_to_five(self):
        self.assertEqual(build_query(5, zip_code="537031234").zip_code, "53703")

    def test_missing_zip(self):
        with self.assertRaises(QueryError) as ctx:
            build_query(5, zip_code="  ")
        self.assertEqual(ctx.exception.user_message, "Please enter a ZIP code.")

    def test_current_location_ignores_zip(self):
        query = build_query(5, use_current_location=True, zip_code="53703")
        self.assertTrue(query.use_current_location)
        self.assertIsNone(query.zip_code)

    def test_blank_services_dropped(self):
        query = build_query(5, ["", "  "], zip_code="53703")
        self.assertEqual(query.service_tags, frozenset())

    def test_radius_must_be_option_when_given(self):
        with self.assertRaises(QueryError):
            build_query(7, zip_code="53703", distance_options=[5, 10, 25])
        self.assertEqual(
            build_query(25, zip_code="53703", distance_options=[5, 10, 25]).radius_miles, 25.0)

    def test_negative_radius(self):
        with self.assertRaises(QueryError):
            build_query(-5, zip_code="53703")

    def test_nan_radius(self):
        with self.assertRaises(QueryError):
            build_query(float('nan'), zip_code="53703")
        with self.assertRaises(QueryError):
            build_query(float('inf'), use_current_location=True)

    def test_describe(self):
        query = build_query(10, ["Dental"], zip_code="53703")
        self.assertEqual(query.describe(), "Within 10 miles of ZIP 53703 - Dental")


class TestSearchManager(unittest.TestCase):
    """End-to-end search with a fixed current location."""

    def setUp(self):
        location_manager = LocationManager(
            ZipGeocoder(),
            CurrentLocationProvider(enabled=True, position=ORIGIN),
        )
        self.manager = SearchManager(ClinicDataset(), location_manager)

    def test_bundled_madison_search(self):
        query = build_query(10, use_current_location=True)
        result = self.manager.search(query)

        self.assertEqual(result.origin, ORIGIN)
        self.assertEqual(result.count, 3)
        self.assertEqual(result.clinics[0].name, "Access Community Health Center - Wingra")
        distances = [c.distance_miles for c in result.clinics]
        self.assertEqual(distances, sorted(distances))

    def test_bundled_dental_search(self):
        query = build_query(100, ["Dental"], use_current_location=True)
        result = self.manager.search(query)
        self.assertTrue(result.clinics)
        for clinic in result.clinics:
            self.assertIn("Dental", clinic.service_tags)
            self.assertLessEqual(clinic.distance_miles, 100)

    def test_location_failure_aborts_before_load(self):
        self.manager.location_manager.current_location.position = None
        self.manager.dataset = ClinicDataset("/nonexistent/clinics.csv")
        with self.assertRaises(LocationUnavailable):
            self.manager.search(build_query(10, use_current_location=True))

    def test_missing_dataset(self):
        self.manager.dataset = ClinicDataset("/nonexistent/clinics.csv")
        with self.assertRaises(ResourceNotFound):
            self.manager.search(build_query(10, use_current_location=True))

    def test_from_settings(self):
        settings = {'dataset_path': None, 'location': {'enabled': True}}
        manager = SearchManager.from_settings(settings, here=ORIGIN)
        result = manager.search(build_query(10, use_current_location=True))
        self.assertEqual(result.count, 3)


class GatedManager:
    """Fake SearchManager whose searches can be held open."""

    def __init__(self):
        self.gates = {}

    def search(self, query: SearchQuery) -> SearchResult:
        gate = self.gates.get(query.zip_code)
        if gate is not None:
            gate.wait(5)
        if query.zip_code == "00000":
            raise LocationUnavailable()
        return SearchResult(query=query, origin=ORIGIN, clinics=())


class TestSearchSession(unittest.TestCase):
    """Only the newest search's outcome is applied."""

    def setUp(self):
        self.manager = GatedManager()
        self.session = SearchSession(self.manager, max_workers=2)

    def tearDown(self):
        for gate in self.manager.gates.values():
            gate.set()
        self.session.close()

    def test_single_search_applied(self):
        token, future = self.session.submit(build_query(5, zip_code="53703"))
        outcome = future.result(timeout=5)
        self.assertEqual(outcome.token, token)
        self.assertTrue(outcome.applied)
        self.assertTrue(outcome.succeeded)
        self.assertIs(self.session.latest(), outcome)

    def test_stale_result_discarded(self):
        gate = threading.Event()
        self.manager.gates["11111"] = gate

        old_token, old_future = self.session.submit(build_query(5, zip_code="11111"))
        new_token, new_future = self.session.submit(build_query(5, zip_code="22222"))
        self.assertGreater(new_token, old_token)

        new_outcome = new_future.result(timeout=5)
        self.assertTrue(new_outcome.applied)

        gate.set()
        old_outcome = old_future.result(timeout=5)
        self.assertFalse(old_outcome.applied)

        latest = self.session.latest()
        self.assertEqual(latest.token, new_token)
        self.assertEqual(latest.result.query.zip_code, "22222")

    def test_error_outcome(self):
        token, future = self.session.submit(build_query(5, zip_code="00000"))
        outcome = future.result(timeout=5)
        self.assertTrue(outcome.applied)
        self.assertFalse(outcome.succeeded)
        self.assertIsInstance(outcome.error, LocationUnavailable)

    def test_latest_none_before_any_search(self):
        self.assertIsNone(self.session.latest())
        self.assertEqual(self.session.current_token, 0)


# ============================================================================
# RUN TESTS
# ============================================================================

if __name__ == "__main__":
    unittest.main(verbosity=2)
