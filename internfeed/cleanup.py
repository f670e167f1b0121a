"""
Retention sweep for old internship postings.

Postings dated more than the retention horizon (default: 90 days) before
now are deleted. Runs on its own daily schedule, independent of
ingestion.
"""

from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .logger import get_logger
from .storage import InternshipStore

logger = get_logger()

RETENTION_DAYS = 90


def sweep(store: InternshipStore, now: Optional[date] = None, retention_days: int = RETENTION_DAYS) -> int:
    """
    Delete postings dated strictly before `now - retention_days`.

    Args:
        store: Store to sweep
        now: Reference date (default: date.today())
        retention_days: Horizon in days (default: 90)

    Returns:
        Number of postings deleted
    """
    now = now or date.today()
    cutoff = now - timedelta(days=retention_days)

    deleted = store.delete_by_date_posted_before(cutoff)
    logger.record_sweep(deleted)
    logger.info(
        f"Cleanup complete: {deleted} removed",
        cutoff=cutoff,
        retention_days=retention_days,
    )
    return deleted


def run_scheduled_sweep(store: InternshipStore, retention_days: int = RETENTION_DAYS) -> int:
    """Sweep for the scheduler: failures are logged, and 0 is returned."""
    logger.info("Starting cleanup of old internships...")
    try:
        return sweep(store, retention_days=retention_days)
    except SQLAlchemyError as e:
        logger.error(f"Cleanup failed: {e}", retention_days=retention_days)
        logger.record_error(type(e).__name__)
        return 0
