"""
Clinic Dataset Loader

PURPOSE: Read the bundled clinic CSV and turn each valid row into a
         ClinicRecord, dropping rows that cannot be trusted

R EQUIVALENT: Like read.csv() followed by a filter(complete.cases(...))
on the required columns

AVIATION ANALOGY: Like loading a navigation database update - any
waypoint entry that fails its checks is left out rather than
grounding the whole aircraft

LOAD POLICY:
    - First line is the header; column names come from it
    - Blank lines are ignored
    - Rows whose field count differs from the header are skipped
    - Rows missing a required column, with no service tags, or with a
      non-numeric latitude/longitude are skipped
    - Skipped rows never raise; they are recorded in a LoadReport

The dataset is small (dozens to low hundreds of rows) and is re-read
for every search. There is no cache.
"""

import math
from pathlib import Path
from typing import Dict, List, Optional

from database.errors import ResourceNotFound, ResourceUnreadable
from database.models import ClinicRecord, Coordinate, LoadReport
from parsers.record_parser import tokenize_line


# ============================================================================
# DATASET FORMAT
# ============================================================================

# Bundled Wisconsin sample, kept beside this module
DEFAULT_DATASET_PATH = Path(__file__).parent / "clinics.csv"

COL_NAME = 'Clinic Name'
COL_SERVICE_TYPE = 'Service Type'
COL_ADDRESS = 'Address'
COL_PHONE = 'Phone'
COL_WEBSITE = 'Website'
COL_LATITUDE = 'Latitude'
COL_LONGITUDE = 'Longitude'

REQUIRED_COLUMNS = (
    COL_NAME, COL_SERVICE_TYPE, COL_ADDRESS, COL_PHONE,
    COL_WEBSITE, COL_LATITUDE, COL_LONGITUDE,
)

# "Medical & Dental" -> {"Medical", "Dental"}
SERVICE_SEPARATOR = '&'


# ============================================================================
# FIELD PARSERS
# ============================================================================

def parse_service_tags(raw: str) -> frozenset:
    """Split a Service Type cell on '&' and trim each piece."""
    return frozenset(
        piece.strip() for piece in raw.split(SERVICE_SEPARATOR) if piece.strip()
    )


def parse_degrees(raw: str) -> Optional[float]:
    """
    Parse a latitude/longitude cell.

    RETURNS:
        float, or None if the text is not a finite decimal number
    """
    try:
        if '_' in raw:
            return None
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def build_clinic(row: Dict[str, str]) -> Optional[ClinicRecord]:
    """
    Build one ClinicRecord from a header -> value map.

    Returns None (and the caller skips the row) if anything required
    is missing or unparseable.
    """
    if any(column not in row for column in REQUIRED_COLUMNS):
        return None

    latitude = parse_degrees(row[COL_LATITUDE])
    longitude = parse_degrees(row[COL_LONGITUDE])
    if latitude is None or longitude is None:
        return None

    service_tags = parse_service_tags(row[COL_SERVICE_TYPE])
    if not service_tags:
        return None

    return ClinicRecord(
        name=row[COL_NAME],
        service_tags=service_tags,
        address=row[COL_ADDRESS],
        phone_number=row[COL_PHONE],
        website_url=row[COL_WEBSITE],
        coordinate=Coordinate(latitude, longitude),
    )


def _split_fields(line: str) -> List[str]:
    # Quotes only group commas here; they are not part of the value
    return [field.strip() for field in tokenize_line(line, strip_quotes=True)]


# ============================================================================
# CONTENT PARSING
# ============================================================================

def parse_clinic_csv(content: str, report: Optional[LoadReport] = None,
                     verbose: bool = False) -> List[ClinicRecord]:
    """
    Parse full CSV text into clinic records.

    PARAMETERS:
        content: Entire file contents
        report: Optional LoadReport to fill with skip reasons
        verbose: Print a warning for every skipped row

    RETURNS:
        List of valid ClinicRecord, in file order
    """
    if report is None:
        report = LoadReport()

    lines = [line.strip() for line in content.splitlines()]

    if len(lines) < 2:
        if verbose:
            print("Warning: CSV file is empty or does not have enough lines.")
        return []

    header = _split_fields(lines[0])
    clinics = []

    for line_number, line in enumerate(lines[1:], start=2):
        if not line:
            continue

        report.rows_read += 1
        fields = _split_fields(line)

        if len(fields) != len(header):
            reason = (f"column count mismatch "
                      f"(expected {len(header)}, got {len(fields)})")
            report.skip(line_number, reason)
            if verbose:
                print(f"Warning: line {line_number}: {reason}")
            continue

        row = dict(zip(header, fields))
        clinic = build_clinic(row)

        if clinic is None:
            reason = "missing or invalid data"
            report.skip(line_number, reason)
            if verbose:
                print(f"Warning: line {line_number}: {reason}: {row}")
            continue

        clinics.append(clinic)

    return clinics


# ============================================================================
# RESOURCE READING
# ============================================================================

def read_dataset_text(path) -> str:
    """
    Read the dataset file as UTF-8 text.

    RAISES:
        ResourceNotFound: File does not exist
        ResourceUnreadable: OS error or invalid UTF-8
    """
    path = Path(path).expanduser()

    if not path.is_file():
        raise ResourceNotFound(detail=str(path))

    try:
        # utf-8-sig drops the BOM that spreadsheet exports like to add
        with open(path, 'r', encoding='utf-8-sig') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ResourceUnreadable(detail=f"{path}: {e.reason}") from e
    except OSError as e:
        raise ResourceUnreadable(detail=f"{path}: {e}") from e


class ClinicDataset:
    """
    PURPOSE: The static clinic resource, loaded on demand

    PARAMETERS:
        path: CSV file path (defaults to the bundled clinics.csv)
        verbose: Print a warning for every skipped row

    EXAMPLE:
        dataset = ClinicDataset()
        clinics = dataset.load()
        print(dataset.last_report.rows_loaded)
    """

    def __init__(self, path=None, verbose: bool = False):
        self.path = Path(path).expanduser() if path else DEFAULT_DATASET_PATH
        self.verbose = verbose
        self.last_report = LoadReport()

    def load(self) -> List[ClinicRecord]:
        """Read and parse the file. Called once per search."""
        content = read_dataset_text(self.path)
        self.last_report = LoadReport()
        return parse_clinic_csv(content, self.last_report, verbose=self.verbose)
