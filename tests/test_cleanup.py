"""Tests for the retention sweep."""

from datetime import date, timedelta

from sqlalchemy.exc import OperationalError

from internfeed.cleanup import run_scheduled_sweep, sweep

NOW = date(2025, 6, 1)


class TestSweep:
    """Test deletion of postings past the retention horizon."""

    def test_ninety_day_boundary(self, store, make_posting):
        for days in (91, 90, 89):
            store.insert(make_posting(role=f"{days} days", date_posted=NOW - timedelta(days=days)))

        deleted = sweep(store, now=NOW)

        assert deleted == 1
        assert sorted(r.role for r in store.all()) == ["89 days", "90 days"]

    def test_sweep_is_idempotent(self, store, make_posting):
        store.insert(make_posting(date_posted=NOW - timedelta(days=200)))

        assert sweep(store, now=NOW) == 1
        assert sweep(store, now=NOW) == 0

    def test_empty_store(self, store):
        assert sweep(store, now=NOW) == 0

    def test_preserves_recent_postings(self, store, make_posting):
        for i in range(5):
            store.insert(make_posting(role=f"job {i}", date_posted=NOW - timedelta(days=i)))

        assert sweep(store, now=NOW) == 0
        assert store.count() == 5

    def test_custom_horizon(self, store, make_posting):
        store.insert(make_posting(date_posted=NOW - timedelta(days=8)))

        assert sweep(store, now=NOW, retention_days=7) == 1

    def test_ignores_created_at(self, store, make_posting):
        # inserted today, but posted long ago
        store.insert(make_posting(date_posted=NOW - timedelta(days=365)))

        assert sweep(store, now=NOW) == 1


class TestScheduledSweep:

    def test_returns_deleted_count(self, store, make_posting):
        store.insert(make_posting(date_posted=date.today() - timedelta(days=100)))

        assert run_scheduled_sweep(store) == 1

    def test_store_failure_is_logged_not_raised(self, store, monkeypatch):
        def broken(cutoff):
            raise OperationalError("DELETE", {}, Exception("database is locked"))

        monkeypatch.setattr(store, "delete_by_date_posted_before", broken)

        assert run_scheduled_sweep(store) == 0
