"""Infrastructure components for linestage.

This layer handles diff input and output:
- Reading diff text from stdin or files
- Parsing raw diff text or FileDiff JSON
- Text and JSON rendering with line selection keys
"""

from .diff_io import (
    format_file_diff_as_json,
    format_file_diff_as_text,
    parse_file_diff,
    read_diff,
    read_diff_from_file,
    read_diff_from_stdin,
)

__all__ = [
    "format_file_diff_as_json",
    "format_file_diff_as_text",
    "parse_file_diff",
    "read_diff",
    "read_diff_from_file",
    "read_diff_from_stdin",
]
