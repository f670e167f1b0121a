"""
Pytest configuration and shared fixtures.
"""

from datetime import date
from pathlib import Path

import pytest

from internfeed.logger import get_logger

# Pin the global logger before any internfeed module binds it; tests
# never write log files.
get_logger(enable_console=False, enable_file=False)

from internfeed.models import InternshipPosting  # noqa: E402
from internfeed.storage import InternshipStore  # noqa: E402

TODAY = date(2025, 1, 10)


SAMPLE_README = """\
# Summer 2026 Tech Internships

Use this repo to share and keep track of software internships.

| Legend | Meaning |
| ------ | ------- |
| 🛂 | Does not offer sponsorship |

| Company | Role | Location | Application/Link | Date Posted |
| ------- | ---- | -------- | ---------------- | ----------- |
| **Acme** 🛂 | Software Engineer Intern | San Francisco, CA | <a href="https://acme.com/apply"><img src="https://i.imgur.com/apply.png" width="84" alt="Apply"></a> | Jan 05 |
| ↳ | Data Science Intern | Remote | <a href="https://acme.com/ds">Apply</a> | Jan 04 |
| **Globex** 🇺🇸 | Hardware Intern</br>Summer 2026 | Austin, TX</br>Remote | [Apply](https://globex.com/jobs/1) | Dec 28 |
| Initech 🔒 | Backend Intern | NYC | https://initech.com/careers | Jan 02 |
| broken row | only |

Made with care by the community.
"""


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sample_readme() -> str:
    """README with a legend table, four data rows, a continuation row and a short row."""
    return SAMPLE_README


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "internships.db"


@pytest.fixture
def store(db_path) -> InternshipStore:
    """Empty store on a temporary SQLite file."""
    return InternshipStore(db_path)


@pytest.fixture
def make_posting():
    """Factory for postings with sensible defaults."""
    def _make(
        company: str = "Acme",
        role: str = "Software Engineer Intern",
        location: str = "Remote",
        application_link: str = "https://acme.com/apply",
        date_posted: date = TODAY,
    ) -> InternshipPosting:
        return InternshipPosting(
            company=company,
            role=role,
            location=location,
            application_link=application_link,
            date_posted=date_posted,
        )
    return _make
