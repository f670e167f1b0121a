"""
Tests for README table parsing.
"""

from datetime import date

import pytest

from internfeed.errors import RowParseError
from internfeed.logger import get_logger
from internfeed.parser import PostingTable, parse_readme, parse_row
from internfeed.table_format import TableFormat

HEADER = "| Company | Role | Location | Application/Link | Date Posted |\n| --- | --- | --- | --- | --- |\n"


class TestParseReadme:
    """Test scanning a whole README."""

    def test_parses_well_formed_rows(self, sample_readme, today):
        postings = list(parse_readme(sample_readme, today=today))

        assert [p.company for p in postings] == ["Acme", "Globex", "Initech"]

    def test_row_fields(self, sample_readme, today):
        acme, globex, initech = parse_readme(sample_readme, today=today)

        assert acme.role == "Software Engineer Intern"
        assert acme.location == "San Francisco, CA"
        assert acme.application_link == "https://acme.com/apply"
        assert acme.date_posted == date(2025, 1, 5)

        assert globex.role == "Hardware Intern Summer 2026"
        assert globex.location == "Austin, TX Remote"
        assert globex.application_link == "https://globex.com/jobs/1"
        assert globex.date_posted == date(2024, 12, 28)

        assert initech.application_link == "https://initech.com/careers"
        assert initech.date_posted == date(2025, 1, 2)

    def test_rows_before_header_are_ignored(self, sample_readme, today):
        companies = {p.company for p in parse_readme(sample_readme, today=today)}
        assert "Legend" not in companies
        assert "🛂" not in companies

    def test_continuation_rows_are_skipped(self, sample_readme, today):
        roles = {p.role for p in parse_readme(sample_readme, today=today)}
        assert "Data Science Intern" not in roles

    def test_short_row_is_dropped_without_error(self, today):
        document = HEADER + "| Acme | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |\n| short | row |\n"
        rejected_before = get_logger().get_metrics()["rows_rejected"]

        postings = list(parse_readme(document, today=today))

        assert len(postings) == 1
        assert postings[0].company == "Acme"
        assert get_logger().get_metrics()["rows_rejected"] == rejected_before + 1

    def test_no_table_yields_nothing(self):
        assert list(parse_readme("# Nothing here\n\n| a | b | c | d | e | f |\n")) == []

    def test_empty_document(self):
        assert list(parse_readme("")) == []

    def test_is_restartable(self, sample_readme, today):
        table = parse_readme(sample_readme, today=today)

        assert isinstance(table, PostingTable)
        assert list(table) == list(table)

    def test_unparseable_date_defaults_to_today(self, today):
        document = HEADER + "| Acme | SWE Intern | NYC | [Apply](https://a.co) | soon |\n"

        (posting,) = parse_readme(document, today=today)

        assert posting.date_posted == today

    def test_windows_line_endings(self, today):
        document = HEADER.replace("\n", "\r\n") + "| Acme | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |\r\n"

        (posting,) = parse_readme(document, today=today)

        assert posting.date_posted == date(2025, 1, 5)

    def test_custom_table_format(self, today):
        fmt = TableFormat(header_marker="| Employer | Position | Place |")
        document = (
            "| Employer | Position | Place | Link | Posted |\n"
            "| --- | --- | --- | --- | --- |\n"
            "| Acme | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |\n"
        )

        assert list(parse_readme(document, today=today)) == []
        assert [p.company for p in parse_readme(document, table_format=fmt, today=today)] == ["Acme"]


class TestParseRow:
    """Test single-row decomposition."""

    def test_too_few_segments(self):
        with pytest.raises(RowParseError) as exc_info:
            parse_row("| Acme | SWE Intern | NYC |")

        assert exc_info.value.line == "| Acme | SWE Intern | NYC |"

    def test_continuation_glyph(self, today):
        assert parse_row("| ↳ | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |", today=today) is None

    def test_continuation_glyph_after_cleaning(self, today):
        row = "| **↳** | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |"
        assert parse_row(row, today=today) is None

    def test_empty_company(self, today):
        assert parse_row("|  | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |", today=today) is None

    def test_empty_location_allowed(self, today):
        posting = parse_row("| Acme | SWE Intern |  | [Apply](https://a.co) | Jan 05 |", today=today)

        assert posting is not None
        assert posting.location == ""

    def test_dedup_key(self, today):
        posting = parse_row("| Acme | SWE Intern | NYC | [Apply](https://a.co) | Jan 05 |", today=today)

        assert posting.dedup_key == ("Acme", "SWE Intern", date(2025, 1, 5))
