"""
Formatters package for Clinic Finder

Provides output formatters for export formats:
- ResultsExcelFormatter: Export search results to Excel
"""

from .results_excel_formatter import ResultsExcelFormatter

__all__ = ['ResultsExcelFormatter']
