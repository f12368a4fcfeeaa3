"""
CLI Argument Parser
===================

Defines all command-line arguments for Clinic Finder.

WHY SEPARATE FILE: Keeps argument definitions organized and makes
it easy to see all available options at a glance.
"""

import argparse


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser.

    WHY THIS APPROACH: argparse provides robust command-line parsing
    with automatic help generation and type checking.
    """
    parser = argparse.ArgumentParser(
        description="Clinic Finder - Locate nearby low-cost healthcare clinics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Dental clinics within 10 miles of a ZIP code:
    python3 run.py --zip 53703 --radius 10 --service Dental

  Any clinic within 25 miles of where you are:
    python3 run.py --current-location --here 43.0731,-89.4012 --radius 25

  Export the results to Excel:
    python3 run.py --zip 53204 --service Medical --service Pharmacy --export outputs/clinics.xlsx

  Show the service and distance choices:
    python3 run.py --list-services
        """
    )

    # ==== GLOBAL OPTIONS ====
    parser.add_argument('--verbose', '-v', action='store_true',
                        help="Enable verbose output (skipped rows, geocoding errors)")
    parser.add_argument('--settings', type=str,
                        help="Path to settings YAML (default: config/finder_settings.yaml)")
    parser.add_argument('--dataset', type=str,
                        help="Path to clinic CSV (overrides settings)")

    # ==== ORIGIN ====
    origin = parser.add_mutually_exclusive_group()
    origin.add_argument('--zip', '-z', type=str, dest='zip_code', metavar='ZIP',
                        help="Search around a ZIP code")
    origin.add_argument('--current-location', action='store_true',
                        help="Search around the current location")
    parser.add_argument('--here', type=str, metavar='LAT,LON',
                        help="Current position (use with --current-location)")

    # ==== FILTERS ====
    parser.add_argument('--radius', '-r', type=float, metavar='MILES',
                        help="Search radius in miles (default from settings)")
    parser.add_argument('--service', '-s', type=str, action='append',
                        dest='services', default=[], metavar='SERVICE',
                        help="Service wanted; repeat for more (none = any service)")

    # ==== OUTPUT ====
    parser.add_argument('--export', '-o', type=str, metavar='FILE',
                        help="Also export results to an Excel file")
    parser.add_argument('--no-links', action='store_true',
                        help="Hide call/directions/website links in the listing")

    # ==== INFO ====
    parser.add_argument('--list-services', action='store_true',
                        help="List service and distance options")
    parser.add_argument('--disclosure', action='store_true',
                        help="Show the data source and distance disclosure")

    return parser
