"""
CLI Package for Clinic Finder
=============================

This package provides the command-line interface for Clinic Finder.

Structure:
    cli/
    ├── __init__.py     - Package exports (this file)
    ├── parser.py       - Argument parser definitions
    └── utils.py        - Shared output formatting utilities

Usage:
    from cli import create_parser
    parser = create_parser()

Note: Command handlers live in run.py.
"""

from .parser import create_parser
from .utils import (
    print_header,
    print_subheader,
    print_success,
    print_error,
    print_warning,
    print_info,
    print_wrapped,
    print_table_row,
    print_list_item,
    print_separator,
    format_count,
    format_miles,
)

__all__ = [
    # Parser
    'create_parser',
    # Output utilities
    'print_header',
    'print_subheader',
    'print_success',
    'print_error',
    'print_warning',
    'print_info',
    'print_wrapped',
    'print_table_row',
    'print_list_item',
    'print_separator',
    # Formatting
    'format_count',
    'format_miles',
]
