"""
Search Results Excel Formatter - Export a search to Excel

PURPOSE: Save the ordered clinic list from one search as a formatted
         workbook the user can print, share, or click through

R EQUIVALENT: Like openxlsx::write.xlsx() with a header style and
hyperlink columns

AVIATION ANALOGY: Like printing the alternates list for the flight bag -
same order and same data as the screen, usable offline

WORKBOOK LAYOUT:
    "Search Results" sheet
        Row 1: Title
        Row 2: Query summary (radius, origin, services)
        Row 3: Clinic count
        Row 5: Column headers
        Row 6+: One row per clinic, nearest first
    "Disclosure" sheet
        Data source and straight-line distance notice
"""

from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from database.models import SearchResult


RESULT_HEADERS = [
    "#", "Clinic Name", "Services", "Address", "Phone",
    "Distance (miles)", "Website", "Directions",
]

HEADER_ROW = 5


class ResultsExcelFormatter:
    """
    PURPOSE: Write a SearchResult to an .xlsx file

    PARAMETERS:
        disclosure: Text for the Disclosure sheet (empty = no sheet)

    EXAMPLE:
        formatter = ResultsExcelFormatter(disclosure=settings['disclosure'])
        formatter.export(result, "outputs/clinics.xlsx")
    """

    # =========================================================================
    # STYLE DEFINITIONS
    # =========================================================================

    HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
    HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
    HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center', wrap_text=True)
    HEADER_BORDER = Border(
        left=Side(style='thin', color='1F4E79'),
        right=Side(style='thin', color='1F4E79'),
        top=Side(style='medium', color='1F4E79'),
        bottom=Side(style='medium', color='1F4E79')
    )

    ALT_ROW_FILL = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
    THIN_BORDER = Border(
        left=Side(style='thin', color='B4B4B4'),
        right=Side(style='thin', color='B4B4B4'),
        top=Side(style='thin', color='B4B4B4'),
        bottom=Side(style='thin', color='B4B4B4')
    )
    DEFAULT_ALIGNMENT = Alignment(vertical='center', wrap_text=True)

    TITLE_FONT = Font(size=18, bold=True, color="2F5496")
    SUBTITLE_FONT = Font(size=12, bold=True, color="595959")
    LINK_FONT = Font(color="0563C1", underline="single")

    def __init__(self, disclosure: Optional[str] = None):
        self.disclosure = (disclosure or '').strip()

    def export(self, result: SearchResult, output_path: str) -> str:
        """
        Export one search result.

        RETURNS:
            str: Path to generated file
        """
        wb = Workbook()
        ws = wb.active
        ws.title = "Search Results"

        self._write_results_sheet(ws, result)

        if self.disclosure:
            self._create_disclosure_sheet(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(str(output_path))
        return str(output_path)

    def _write_results_sheet(self, ws, result: SearchResult) -> None:
        num_cols = len(RESULT_HEADERS)

        ws['A1'] = "Low-Cost Clinic Search"
        ws['A1'].font = self.TITLE_FONT
        ws.merge_cells(f'A1:{get_column_letter(num_cols)}1')
        ws.row_dimensions[1].height = 30

        ws['A2'] = result.query.describe()
        ws['A2'].font = self.SUBTITLE_FONT
        ws['A3'] = f"Number of clinics found: {result.count}"

        self._apply_header_style(ws, RESULT_HEADERS, row=HEADER_ROW)

        row = HEADER_ROW + 1
        for rank, clinic in enumerate(result.clinics, 1):
            ws.cell(row=row, column=1, value=rank)
            ws.cell(row=row, column=2, value=clinic.name)
            ws.cell(row=row, column=3, value=clinic.services_display())
            ws.cell(row=row, column=4, value=clinic.address)
            ws.cell(row=row, column=5, value=clinic.phone_number)

            distance_cell = ws.cell(row=row, column=6, value=round(clinic.distance_miles, 2))
            distance_cell.number_format = '0.00'

            if clinic.has_website():
                self._write_link(ws.cell(row=row, column=7), clinic.website_url, "Website")

            self._write_link(ws.cell(row=row, column=8),
                             clinic.directions_url(result.origin), "Directions")

            fill = self.ALT_ROW_FILL if rank % 2 == 0 else None
            for col in range(1, num_cols + 1):
                cell = ws.cell(row=row, column=col)
                cell.border = self.THIN_BORDER
                cell.alignment = self.DEFAULT_ALIGNMENT
                if fill is not None:
                    cell.fill = fill
            row += 1

        ws.freeze_panes = f'C{HEADER_ROW + 1}'
        if result.clinics:
            ws.auto_filter.ref = f"A{HEADER_ROW}:{get_column_letter(num_cols)}{row - 1}"

        self._auto_size_columns(ws, RESULT_HEADERS, first_row=HEADER_ROW)

    def _write_link(self, cell, url: str, label: str) -> None:
        cell.value = label
        cell.hyperlink = url
        cell.font = self.LINK_FONT

    def _create_disclosure_sheet(self, wb: Workbook) -> None:
        ws = wb.create_sheet("Disclosure")
        ws['A1'] = "Disclosure Statement"
        ws['A1'].font = self.SUBTITLE_FONT
        ws['A2'] = self.disclosure
        ws['A2'].alignment = Alignment(wrap_text=True, vertical='top')
        ws.column_dimensions['A'].width = 100
        ws.row_dimensions[2].height = 120

    def _apply_header_style(self, ws, headers: List[str], row: int = 1) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.fill = self.HEADER_FILL
            cell.font = self.HEADER_FONT
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.HEADER_BORDER
        ws.row_dimensions[row].height = 25

    def _auto_size_columns(self, ws, headers: List[str], first_row: int = 1,
                           min_width: int = 8, max_width: int = 50) -> None:
        """
        Size columns to their content, within bounds.

        Only rows from the header down are sampled (the title rows are
        merged and would widen column A).
        """
        for i, header in enumerate(headers, 1):
            max_length = len(header)
            for row in range(first_row + 1, min(ws.max_row + 1, first_row + 101)):
                value = ws.cell(row=row, column=i).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))
            ws.column_dimensions[get_column_letter(i)].width = max(
                min_width, min(max_length + 2, max_width))
