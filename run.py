#!/usr/bin/env python3
"""
CLINIC FINDER CLI

PURPOSE: Command-line front end for finding nearby low-cost healthcare
         clinics by ZIP code or current location

R EQUIVALENT: Like an R package's main script that routes to different
              functions based on command-line arguments

AVIATION ANALOGY: Like asking the FMS for the nearest suitable airports -
                  give it a position, a range and the services you need,
                  get back a list sorted by distance

USAGE EXAMPLES:
    # Dental clinics within 10 miles of a ZIP code
    python3 run.py --zip 53703 --radius 10 --service Dental

    # Medical or pharmacy within 25 miles of a known position
    python3 run.py --current-location --here 43.0731,-89.4012 --radius 25 \\
        --service Medical --service Pharmacy

    # Export the list to Excel
    python3 run.py --zip 53204 --export outputs/clinics.xlsx

    # Show service and distance choices
    python3 run.py --list-services

    # Data source and distance disclosure
    python3 run.py --disclosure
"""

import os
import sys

import yaml

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from cli import (
    create_parser,
    format_count,
    format_miles,
    print_error,
    print_header,
    print_info,
    print_list_item,
    print_separator,
    print_subheader,
    print_success,
    print_table_row,
    print_warning,
    print_wrapped,
)
from config import load_settings
from database.errors import ClinicFinderError, QueryError
from database.models import Coordinate, SearchResult
from formatters.results_excel_formatter import ResultsExcelFormatter
from managers.search_manager import SearchManager, build_query


# ============================================================================
# OUTPUT
# ============================================================================

def print_results(result: SearchResult, show_links: bool = True) -> None:
    """Print the ordered clinic list, one block per clinic."""
    print_header("Search Results")
    print_info(result.query.describe())
    print_info(f"Number of clinics found: {result.count}")

    if result.is_empty():
        print_info("No results found")
        return

    for rank, clinic in enumerate(result.clinics, 1):
        print_subheader(f"{rank}. {clinic.name}")
        print_table_row("Service Type", clinic.services_display())
        print_table_row("Address", clinic.address)
        print_table_row("Phone", clinic.phone_number)
        print_table_row("Distance", clinic.distance_display())

        if show_links:
            print_table_row("Call", clinic.tel_url(), indent=1)
            print_table_row("Directions", clinic.directions_url(result.origin), indent=1)
            if clinic.has_website():
                print_table_row("Website", clinic.website_url, indent=1)

    print()
    print_separator()


# ============================================================================
# COMMAND HANDLERS
# ============================================================================

def handle_search(settings: dict, args) -> None:
    """Run one search and print (and optionally export) the results."""
    here = None
    if args.here:
        try:
            here = Coordinate.parse(args.here)
        except ValueError as e:
            raise QueryError(detail=str(e),
                             user_message=f"Invalid --here position: {args.here}") from e

    radius = args.radius if args.radius is not None else settings['default_radius_miles']
    distance_options = settings['distance_options'] if settings.get('strict_radius') else None

    query = build_query(
        radius,
        args.services,
        zip_code=args.zip_code,
        use_current_location=args.current_location,
        distance_options=distance_options,
    )

    unknown = sorted(query.service_tags - set(settings.get('service_options') or []))
    if unknown:
        print_warning(f"Not a listed service option: {', '.join(unknown)}")

    if settings.get('notice'):
        print_info(settings['notice'])

    manager = SearchManager.from_settings(
        settings, dataset_path=args.dataset, here=here, verbose=args.verbose)
    result = manager.search(query)

    if args.verbose:
        report = manager.dataset.last_report
        print_info(f"Loaded {format_count(report.rows_loaded, 'clinic')} "
                   f"from {manager.dataset.path} "
                   f"({format_count(len(report.skipped), 'row')} skipped)")

    print_results(result, show_links=not args.no_links)

    if args.export:
        formatter = ResultsExcelFormatter(disclosure=settings.get('disclosure'))
        path = formatter.export(result, args.export)
        print_success(f"Exported search results to: {path}")


def handle_list_services(settings: dict, args) -> None:
    """Show the service checkboxes and distance choices."""
    print_subheader("Services")
    for service in settings.get('service_options') or []:
        print_list_item(service)

    print_subheader("Distances")
    for miles in settings.get('distance_options') or []:
        marker = " (default)" if miles == settings.get('default_radius_miles') else ""
        print_list_item(f"{format_miles(miles)}{marker}")


def handle_disclosure(settings: dict, args) -> None:
    print_header("Disclosure Statement")
    print_wrapped(settings.get('disclosure') or "No disclosure configured.")


# ============================================================================
# MAIN
# ============================================================================

def main(argv=None) -> int:
    """
    Parse arguments and dispatch.

    RETURNS:
        Process exit status (0 ok, 1 error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print_error(f"Could not load settings: {e}")
        return 1

    try:
        if args.list_services:
            handle_list_services(settings, args)

        elif args.disclosure:
            handle_disclosure(settings, args)

        elif args.zip_code is not None or args.current_location:
            handle_search(settings, args)

        else:
            parser.print_help()

    except ClinicFinderError as e:
        if args.verbose and e.detail:
            print_error(f"{e.user_message} ({e.detail})")
        else:
            print_error(e.user_message)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
