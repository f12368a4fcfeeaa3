"""
Unit Tests for the Record Parser

PURPOSE: Verify line tokenizing, including quoted delimiters and the
         quote-retention behavior

RUN TESTS:
    python3 -m pytest tests/ -v
    OR
    python3 tests/test_record_parser.py
"""

import os
import sys
import unittest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from parsers.record_parser import tokenize_line


class TestPlainFields(unittest.TestCase):
    """Lines without quotes split on every delimiter."""

    def test_n_fields(self):
        """N unquoted comma-separated fields give exactly N fields."""
        for n in range(1, 8):
            line = ",".join(f"f{i}" for i in range(n))
            self.assertEqual(len(tokenize_line(line)), n, f"Failed for n={n}")

    def test_field_values_in_order(self):
        self.assertEqual(tokenize_line("Clinic,Dental,Madison"),
                         ["Clinic", "Dental", "Madison"])

    def test_empty_middle_field_kept(self):
        self.assertEqual(tokenize_line("a,,c"), ["a", "", "c"])

    def test_trailing_empty_field_dropped(self):
        """Only a non-empty accumulator is emitted at end of line."""
        self.assertEqual(tokenize_line("a,b,"), ["a", "b"])

    def test_empty_line(self):
        self.assertEqual(tokenize_line(""), [])

    def test_whitespace_is_content(self):
        self.assertEqual(tokenize_line(" a , b"), [" a ", " b"])

    def test_custom_delimiter(self):
        self.assertEqual(tokenize_line("a;b,c;d", delimiter=';'), ["a", "b,c", "d"])

    def test_multi_char_delimiter_rejected(self):
        with self.assertRaises(ValueError):
            tokenize_line("a,b", delimiter=',,')


class TestQuotedFields(unittest.TestCase):
    """Quotes group delimiters; quote characters are retained by default."""

    def test_quoted_comma_three_fields(self):
        fields = tokenize_line('a,"b,c",d')
        self.assertEqual(len(fields), 3)
        self.assertIn(",", fields[1])

    def test_quotes_retained(self):
        self.assertEqual(tokenize_line('a,"b,c",d'), ['a', '"b,c"', 'd'])

    def test_strip_quotes_option(self):
        self.assertEqual(tokenize_line('a,"b,c",d', strip_quotes=True), ['a', 'b,c', 'd'])

    def test_quoted_address(self):
        line = 'Clinic,"3434 E Washington Ave, Madison, WI 53704",608-443-5480'
        fields = tokenize_line(line, strip_quotes=True)
        self.assertEqual(fields[1], "3434 E Washington Ave, Madison, WI 53704")

    def test_unterminated_quote_is_best_effort(self):
        """An open quote swallows the rest of the line, without raising."""
        self.assertEqual(tokenize_line('a,"b,c'), ['a', '"b,c'])

    def test_doubled_quote_is_not_an_escape(self):
        """"" toggles twice; the comma after it still splits."""
        self.assertEqual(tokenize_line('a"",b'), ['a""', 'b'])


# ============================================================================
# RUN TESTS
# ============================================================================

if __name__ == "__main__":
    unittest.main(verbosity=2)
