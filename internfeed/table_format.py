"""
Marker strings and column layout of the upstream internship table.

The upstream README is not a versioned format. Everything the parser
knows about its shape lives here so a layout change means a new
TableFormat, not a new parser.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TableFormat:
    header_marker: str = "| Company | Role | Location |"
    separator_marker: str = "| ---"
    row_prefix: str = "|"
    delimiter: str = "|"
    # U+21B3, used upstream for follow-on rows under the same company
    continuation_glyph: str = "↳"
    min_segments: int = 6
    company_col: int = 1
    role_col: int = 2
    location_col: int = 3
    link_col: int = 4
    date_col: int = 5

    def is_header(self, line: str) -> bool:
        return self.header_marker in line

    def is_separator(self, line: str) -> bool:
        return self.separator_marker in line

    def is_data_row(self, line: str) -> bool:
        return line.startswith(self.row_prefix)

    def split_row(self, line: str) -> List[str] | None:
        """Split a data row into cells, or None when it has too few segments."""
        segments = line.split(self.delimiter)
        if len(segments) < self.min_segments:
            return None
        return segments

    def is_continuation(self, company: str) -> bool:
        return company.startswith(self.continuation_glyph)


DEFAULT_FORMAT = TableFormat()
