"""
CLI Output Helpers
==================

Console formatting for search results, option lists and messages.

All output goes through print(); errors go to stderr so a script can
capture the result list on stdout alone.

LAYOUT:
    ============================================================
    SEARCH RESULTS                         <- print_header
    ============================================================
    1. Wingra Clinic                       <- print_subheader
    ----------------------------------------
    Address:       1635 Beld St, ...       <- print_table_row
      Call:        tel://608-443-5480      <- print_table_row(indent=1)
"""

import sys
import textwrap


RULE_WIDTH = 60
SUBRULE_WIDTH = 40

# Labels in a clinic block line up on this column
LABEL_WIDTH = 14

INDENT = "  "


def _indent(level: int) -> str:
    return INDENT * level


# =============================================================================
# HEADINGS
# =============================================================================

def print_header(title: str, width: int = RULE_WIDTH) -> None:
    """Blank line, then the title in capitals between two rules."""
    rule = "=" * width
    print()
    print(rule)
    print(title.upper())
    print(rule)


def print_subheader(title: str, width: int = SUBRULE_WIDTH) -> None:
    print()
    print(title)
    print("-" * width)


def print_separator(char: str = "-", width: int = RULE_WIDTH) -> None:
    print(char * width)


# =============================================================================
# MESSAGES
# =============================================================================

def print_info(message: str) -> None:
    print(message)


def print_success(message: str) -> None:
    print(f"✓ {message}")


def print_warning(message: str) -> None:
    print(f"Warning: {message}")


def print_error(message: str) -> None:
    """Error line on stderr (the only output of a failed command)."""
    print(f"Error: {message}", file=sys.stderr)


# =============================================================================
# BODY TEXT
# =============================================================================

def print_wrapped(text: str, width: int = RULE_WIDTH, indent: int = 0) -> None:
    """
    Print a paragraph wrapped to width.

    Hyphenated words ("straight-line") are never split across lines.
    """
    prefix = _indent(indent)
    wrapper = textwrap.TextWrapper(width=width, initial_indent=prefix,
                                   subsequent_indent=prefix, break_on_hyphens=False)
    for line in wrapper.wrap(text):
        print(line)


def print_table_row(label: str, value: str, indent: int = 0,
                    label_width: int = LABEL_WIDTH) -> None:
    """
    Print one "Label:  value" line of a clinic block.

    The label column is padded so values line up; nested rows (the
    action links) keep the same value column.

    EXAMPLE:
        print_table_row("Distance", "1.52 miles")
        print_table_row("Call", "tel://608-443-5480", indent=1)
    """
    prefix = _indent(indent)
    pad = max(label_width - len(prefix), len(label) + 1)
    print(f"{prefix}{label + ':':<{pad}} {value}")


def print_list_item(item: str, indent: int = 0, bullet: str = "•") -> None:
    print(f"{_indent(indent)}{bullet} {item}")


# =============================================================================
# VALUE FORMATTING
# =============================================================================

def format_count(count: int, singular: str, plural: str = None) -> str:
    """
    "1 clinic", "3 clinics", "1 row", "0 rows".

    plural defaults to singular + "s".
    """
    word = singular if count == 1 else (plural or singular + "s")
    return f"{count} {word}"


def format_miles(value: float) -> str:
    """Radius choice for display: 5 -> '5 miles', 2.5 -> '2.5 miles'."""
    return f"{value:g} miles"
