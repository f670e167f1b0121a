"""
Tests for reconciling parsed postings against the store.
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from internfeed.errors import ReconcileError
from internfeed.reconcile import MaxAgeFilter, ReconcileResult, reconcile

TODAY = date(2025, 1, 10)


class TestReconcile:

    def test_inserts_new_postings(self, store, make_posting):
        batch = [make_posting(role="a"), make_posting(role="b")]

        result = reconcile(batch, store, today=TODAY)

        assert result == ReconcileResult(inserted=2, skipped_existing=0, skipped_stale=0)
        assert store.count() == 2

    def test_second_pass_inserts_nothing(self, store, make_posting):
        batch = [make_posting(role="a"), make_posting(role="b"), make_posting(company="Globex")]

        reconcile(batch, store, today=TODAY)
        second = reconcile(batch, store, today=TODAY)

        assert second.inserted == 0
        assert second.skipped_existing == 3
        assert store.count() == 3

    def test_duplicate_key_in_one_batch_inserted_once(self, store, make_posting):
        batch = [
            make_posting(location="NYC", application_link="https://a"),
            make_posting(location="SF", application_link="https://b"),
        ]

        result = reconcile(batch, store, today=TODAY)

        assert result.inserted == 1
        assert result.skipped_existing == 1
        assert store.all()[0].location == "NYC"

    def test_existing_row_is_not_overwritten(self, store, make_posting):
        reconcile([make_posting(location="NYC")], store, today=TODAY)

        reconcile([make_posting(location="SF")], store, today=TODAY)

        assert [r.location for r in store.all()] == ["NYC"]

    def test_empty_batch_is_noop(self, store):
        assert reconcile([], store, today=TODAY) == ReconcileResult()
        assert store.count() == 0

    def test_accepts_any_iterable(self, store, make_posting):
        result = reconcile((p for p in [make_posting()]), store, today=TODAY)

        assert result.inserted == 1


class TestAgeFilters:

    def test_stale_postings_are_skipped(self, store, make_posting):
        batch = [
            make_posting(role="fresh", date_posted=TODAY - timedelta(days=30)),
            make_posting(role="stale", date_posted=TODAY - timedelta(days=31)),
        ]

        result = reconcile(batch, store, filters=[MaxAgeFilter(30)], today=TODAY)

        assert result.inserted == 1
        assert result.skipped_stale == 1
        assert [r.role for r in store.all()] == ["fresh"]

    def test_filters_compose(self, store, make_posting):
        batch = [
            make_posting(role="recent", date_posted=TODAY - timedelta(days=10)),
            make_posting(role="month-old", date_posted=TODAY - timedelta(days=45)),
            make_posting(role="ancient", date_posted=TODAY - timedelta(days=120)),
        ]

        loose = reconcile(batch, store, filters=[MaxAgeFilter(90)], today=TODAY)

        assert loose.inserted == 2
        assert loose.skipped_stale == 1

    def test_strictest_filter_wins(self, store, make_posting):
        batch = [make_posting(date_posted=TODAY - timedelta(days=45))]

        result = reconcile(batch, store, filters=[MaxAgeFilter(90), MaxAgeFilter(30)], today=TODAY)

        assert result.skipped_stale == 1
        assert store.count() == 0

    def test_no_filters_keeps_everything(self, store, make_posting):
        result = reconcile([make_posting(date_posted=date(2020, 1, 1))], store, today=TODAY)

        assert result.inserted == 1

    def test_cutoff(self):
        assert MaxAgeFilter(30).cutoff(TODAY) == date(2024, 12, 11)


class TestStoreFailures:

    def test_store_error_raises_reconcile_error(self, store, make_posting, monkeypatch):
        def broken(*args):
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        monkeypatch.setattr(store, "exists_by_key", broken)

        with pytest.raises(ReconcileError) as exc_info:
            reconcile([make_posting()], store, today=TODAY)

        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_racing_insert_counts_as_existing(self, store, make_posting, monkeypatch):
        # another writer got there between the check and the insert
        store.insert(make_posting())
        monkeypatch.setattr(store, "exists_by_key", lambda *args: False)

        result = reconcile([make_posting()], store, today=TODAY)

        assert result.inserted == 0
        assert result.skipped_existing == 1


class TestReconcileResult:

    def test_summary(self):
        result = ReconcileResult(inserted=3, skipped_existing=5, skipped_stale=2)

        assert result.summary() == (
            "Refreshed! Added 3 new internships "
            "(skipped 5 already stored, 2 older than the ingestion horizon)"
        )
