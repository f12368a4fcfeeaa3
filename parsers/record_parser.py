"""
Delimited Record Parser

PURPOSE: Split one line of the clinic dataset into fields, keeping
         delimiters that appear inside double-quoted segments

R EQUIVALENT: Like strsplit() on ",", except quoted commas survive
(a tiny subset of what readr::read_csv does)

This is deliberately a minimal tokenizer, not an RFC 4180 reader:
- A double quote toggles "inside quotes"; it is NOT an escape
- Quote characters are kept in the field text by default
  (pass strip_quotes=True to drop them)
- A trailing empty field after the final delimiter is not emitted
- Bad quoting never raises; the result is best-effort

EXAMPLE:
    tokenize_line('a,"b,c",d')
    # ['a', '"b,c"', 'd']

    tokenize_line('a,"b,c",d', strip_quotes=True)
    # ['a', 'b,c', 'd']
"""

from typing import List


QUOTE_CHAR = '"'
DEFAULT_DELIMITER = ','


def tokenize_line(line: str, delimiter: str = DEFAULT_DELIMITER,
                  strip_quotes: bool = False) -> List[str]:
    """
    Tokenize one line into fields.

    PARAMETERS:
        line: One row of text, without its newline
        delimiter: Single field separator character
        strip_quotes: Drop quote characters from the output

    RETURNS:
        List of field strings, in order
    """
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got: {delimiter!r}")

    fields = []
    current = []
    inside_quote = False

    for char in line:
        if char == delimiter and not inside_quote:
            fields.append(''.join(current))
            current = []
        elif char == QUOTE_CHAR:
            inside_quote = not inside_quote
            if not strip_quotes:
                current.append(char)
        else:
            current.append(char)

    # Only a non-empty accumulator becomes the last field
    if current:
        fields.append(''.join(current))

    return fields
