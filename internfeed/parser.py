"""
Parser for the upstream internship README.

Scans the markdown for the internship table and turns each data row into
an InternshipPosting. A malformed row is logged and dropped; it never
stops the scan.
"""

from datetime import date
from typing import Iterator, Optional

from .errors import RowParseError
from .logger import get_logger
from .models import InternshipPosting
from .normalize import clean_text, extract_link, infer_posting_date
from .table_format import DEFAULT_FORMAT, TableFormat

logger = get_logger()


def parse_row(
    line: str,
    table_format: TableFormat = DEFAULT_FORMAT,
    today: Optional[date] = None,
) -> Optional[InternshipPosting]:
    """
    Decompose one table row into a posting.

    Args:
        line: Raw markdown line starting with the row prefix
        table_format: Column layout and markers of the table
        today: Reference date for year inference

    Returns:
        The posting, or None for rows that are not postings of their own
        (continuation rows, rows without a company)

    Raises:
        RowParseError: If the row has too few cells
    """
    cells = table_format.split_row(line)
    if cells is None:
        raise RowParseError(
            f"Row has fewer than {table_format.min_segments} segments", line=line
        )

    company = clean_text(cells[table_format.company_col])
    role = clean_text(cells[table_format.role_col])
    location = clean_text(cells[table_format.location_col])
    link_cell = cells[table_format.link_col]
    date_text = clean_text(cells[table_format.date_col])

    if not company or table_format.is_continuation(company):
        return None

    return InternshipPosting(
        company=company,
        role=role,
        location=location,
        application_link=extract_link(link_cell),
        date_posted=infer_posting_date(date_text, today=today),
    )


class PostingTable:
    """Lazy view of the postings in one README document.

    Iterating scans the document from the top each time, so the table can
    be walked more than once.
    """

    def __init__(
        self,
        document: str,
        table_format: TableFormat = DEFAULT_FORMAT,
        today: Optional[date] = None,
    ):
        self.document = document
        self.table_format = table_format
        self.today = today

    def __iter__(self) -> Iterator[InternshipPosting]:
        fmt = self.table_format
        in_table = False

        for line in self.document.splitlines():
            if fmt.is_header(line):
                in_table = True
                continue
            if fmt.is_separator(line):
                continue
            if not in_table or not fmt.is_data_row(line):
                continue

            try:
                posting = parse_row(line, fmt, today=self.today)
            except RowParseError as e:
                logger.debug("Could not parse table row", line=line[:100], error=str(e))
                logger.record_row(parsed=False)
                continue

            if posting is None:
                logger.debug("Skipped table row", line=line[:100])
                logger.record_row(parsed=False)
                continue

            logger.record_row(parsed=True)
            yield posting


def parse_readme(
    document: str,
    table_format: TableFormat = DEFAULT_FORMAT,
    today: Optional[date] = None,
) -> PostingTable:
    return PostingTable(document, table_format=table_format, today=today)
