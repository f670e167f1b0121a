from dataclasses import dataclass
from datetime import date
from typing import Tuple

DedupKey = Tuple[str, str, date]


@dataclass(frozen=True)
class InternshipPosting:
    """One row of the upstream internship table, after normalization.

    The store assigns the id and created_at; a parsed posting has neither.
    """

    company: str
    role: str
    location: str
    application_link: str
    date_posted: date

    @property
    def dedup_key(self) -> DedupKey:
        return (self.company, self.role, self.date_posted)
