"""
Reconcile freshly parsed postings against the store.

A posting is inserted only when no stored row has the same
(company, role, date_posted). Stored rows are never updated. Age filters
run first and are independent of each other, so the ingestion-staleness
cutoff and the retention horizon can be combined freely.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from .errors import ReconcileError
from .logger import get_logger
from .models import InternshipPosting
from .storage import InternshipStore

logger = get_logger()


@dataclass(frozen=True)
class MaxAgeFilter:
    """Accepts postings dated no earlier than `days` days before today."""

    days: int

    def cutoff(self, today: date) -> date:
        return today - timedelta(days=self.days)

    def accepts(self, posting: InternshipPosting, today: date) -> bool:
        return not posting.date_posted < self.cutoff(today)


@dataclass
class ReconcileResult:
    inserted: int = 0
    skipped_existing: int = 0
    skipped_stale: int = 0

    def summary(self) -> str:
        return (
            f"Refreshed! Added {self.inserted} new internships "
            f"(skipped {self.skipped_existing} already stored, "
            f"{self.skipped_stale} older than the ingestion horizon)"
        )


def reconcile(
    postings: Iterable[InternshipPosting],
    store: InternshipStore,
    filters: Sequence[MaxAgeFilter] = (),
    today: Optional[date] = None,
) -> ReconcileResult:
    """
    Insert the postings the store does not have yet.

    Args:
        postings: Parsed postings; may be empty
        store: Target store
        filters: Age filters; a posting any filter rejects counts as stale
        today: Reference date for the filters (default: date.today())

    Returns:
        Counts of inserted, already-stored and stale postings

    Raises:
        ReconcileError: If the store fails during a check or insert
    """
    today = today or date.today()
    result = ReconcileResult()

    for posting in postings:
        if not all(f.accepts(posting, today) for f in filters):
            result.skipped_stale += 1
            continue

        try:
            if store.exists_by_key(*posting.dedup_key):
                result.skipped_existing += 1
                continue
            new_id = store.insert(posting)
        except SQLAlchemyError as e:
            logger.error(
                "Store failure during reconcile",
                company=posting.company,
                role=posting.role,
                error=str(e),
            )
            logger.record_error(type(e).__name__)
            raise ReconcileError(f"Store failure for {posting.company} / {posting.role}: {e}") from e

        if new_id is None:
            # lost a race with another writer; the row is there now
            result.skipped_existing += 1
            continue

        logger.debug("Inserted internship", id=new_id, company=posting.company, role=posting.role)
        result.inserted += 1

    logger.record_reconcile(result.inserted, result.skipped_existing, result.skipped_stale)
    logger.info(
        f"Reconcile complete: {result.inserted} new, {result.skipped_existing} existing, "
        f"{result.skipped_stale} stale"
    )
    return result
