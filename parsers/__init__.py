"""
Parsers package for Clinic Finder

Provides the delimited-text tokenizer used by the dataset loader.
"""

from .record_parser import tokenize_line

__all__ = ['tokenize_line']
