"""
Ingestion pipeline: fetch -> parse -> reconcile.

The whole README is downloaded before parsing starts, and every row is
parsed before reconciliation starts. A failed or unchanged fetch ends the
run with an empty result.
"""

from datetime import date
from typing import List, Optional, Sequence

from .env import Settings
from .errors import FetchError, ReconcileError
from .fetcher import ReadmeFetcher
from .logger import get_logger
from .parser import parse_readme
from .reconcile import MaxAgeFilter, ReconcileResult, reconcile
from .storage import InternshipStore
from .table_format import DEFAULT_FORMAT, TableFormat

logger = get_logger()


def build_filters(settings: Settings) -> List[MaxAgeFilter]:
    """Age filters applied at ingestion: the retention horizon, plus the
    stricter staleness cutoff when one is configured."""
    filters = [MaxAgeFilter(settings.retention_days)]
    if settings.ingest_max_age_days is not None:
        filters.append(MaxAgeFilter(settings.ingest_max_age_days))
    return filters


class IngestionPipeline:

    def __init__(
        self,
        fetcher: ReadmeFetcher,
        store: InternshipStore,
        filters: Sequence[MaxAgeFilter] = (),
        table_format: TableFormat = DEFAULT_FORMAT,
    ):
        self.fetcher = fetcher
        self.store = store
        self.filters = list(filters)
        self.table_format = table_format

    @classmethod
    def from_settings(cls, settings: Settings, store: InternshipStore) -> "IngestionPipeline":
        fetcher = ReadmeFetcher(
            url=settings.readme_url,
            timeout=settings.request_timeout,
            token=settings.github_token,
        )
        return cls(fetcher, store, filters=build_filters(settings))

    def run(self, today: Optional[date] = None) -> ReconcileResult:
        """
        Run one ingestion cycle.

        Returns:
            Reconcile counts; all zero when the fetch failed or upstream
            reported the README unchanged

        Raises:
            ReconcileError: If the store fails. The fetcher's ETag is dropped
                first so the next run re-reads the full README.
        """
        try:
            fetched = self.fetcher.fetch()
        except FetchError as e:
            logger.warning("No new data this cycle: fetch failed", error=str(e))
            return ReconcileResult()

        if fetched.not_modified:
            logger.info("No new data from upstream")
            return ReconcileResult()

        postings = list(parse_readme(fetched.body, table_format=self.table_format, today=today))
        logger.info(f"Parsed {len(postings)} internships from README")

        try:
            return reconcile(postings, self.store, filters=self.filters, today=today)
        except ReconcileError:
            self.fetcher.reset_validator()
            raise

    def run_scheduled(self) -> ReconcileResult:
        """Run a cycle for the scheduler; store failures are logged, not raised."""
        logger.info("Starting README poll...")
        try:
            result = self.run()
        except ReconcileError as e:
            logger.error(f"Error during README poll: {e}")
            return ReconcileResult()
        logger.info(
            f"Poll complete: {result.inserted} new, {result.skipped_existing} existing, "
            f"{result.skipped_stale} stale"
        )
        return result
