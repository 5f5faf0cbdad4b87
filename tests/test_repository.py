"""
Tests for ContestRepository.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import OperationalError

from contests.exceptions import PersistenceFailure
from contests.models import Contest, ContestStatus, Platform
from contests.services.repository import ContestRepository


def _defaults(fixed_now, **overrides):
    values = {
        "date": fixed_now + timedelta(days=1),
        "end_time": fixed_now + timedelta(days=1, hours=2),
        "link": "https://codeforces.com/contest/2063",
        "status": ContestStatus.UPCOMING,
    }
    values.update(overrides)
    return values


@pytest.mark.django_db
class TestUpsert:
    """Insert-or-update keyed by (name, platform)."""

    def test_upsert_creates_contest(self, fixed_now):
        repo = ContestRepository()

        contest = repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)

        assert contest.pk is not None
        assert contest.updated_at == fixed_now
        assert Contest.objects.count() == 1

    def test_upsert_twice_keeps_one_row_and_advances_updated_at(self, fixed_now):
        repo = ContestRepository()
        later = fixed_now + timedelta(minutes=5)

        first = repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)
        second = repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), later)

        assert Contest.objects.count() == 1
        assert first.pk == second.pk
        assert second.updated_at == later
        assert second.updated_at > first.updated_at

    def test_same_name_on_other_platform_is_a_separate_contest(self, fixed_now):
        repo = ContestRepository()

        repo.upsert("Weekly Contest", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)
        repo.upsert("Weekly Contest", Platform.LEETCODE, _defaults(fixed_now), fixed_now)

        assert Contest.objects.count() == 2

    def test_upsert_updates_fields_in_place(self, fixed_now):
        repo = ContestRepository()
        repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)

        moved = fixed_now + timedelta(days=2)
        repo.upsert(
            "Round 1000",
            Platform.CODEFORCES,
            _defaults(fixed_now, date=moved, status=ContestStatus.UPCOMING),
            fixed_now,
        )

        assert Contest.objects.get().date == moved

    def test_upsert_never_touches_solution_link(self, fixed_now):
        repo = ContestRepository()
        contest = repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)
        contest.solution_link = "https://www.youtube.com/watch?v=admin"
        contest.save()

        repo.upsert(
            "Round 1000",
            Platform.CODEFORCES,
            _defaults(fixed_now, solution_link="https://www.youtube.com/watch?v=other"),
            fixed_now,
        )

        contest.refresh_from_db()
        assert contest.solution_link == "https://www.youtube.com/watch?v=admin"


@pytest.mark.django_db
class TestInsertMissing:
    """Insert-only writes for fill-only sources."""

    def test_creates_missing_contest(self, fixed_now):
        created = ContestRepository().insert_missing(
            "Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now
        )

        assert created is True
        assert Contest.objects.get().updated_at == fixed_now

    def test_existing_contest_keeps_fields(self, fixed_now):
        repo = ContestRepository()
        later = fixed_now + timedelta(minutes=5)
        repo.upsert("Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now)

        created = repo.insert_missing(
            "Round 1000",
            Platform.CODEFORCES,
            _defaults(fixed_now, link="https://agg.example.com/c/1", date=fixed_now),
            later,
        )

        contest = Contest.objects.get()
        assert created is False
        assert contest.link == "https://codeforces.com/contest/2063"
        assert contest.date == fixed_now + timedelta(days=1)
        assert contest.updated_at == later


@pytest.mark.django_db
class TestQueries:
    """Read helpers."""

    def test_find_latest_by_updated_at(self, make_contest, fixed_now):
        make_contest(name="Old", updated_at=fixed_now - timedelta(hours=3))
        newest = make_contest(name="New", updated_at=fixed_now - timedelta(minutes=1))

        assert ContestRepository().find_latest_by_updated_at() == newest

    def test_find_latest_on_empty_store(self):
        assert ContestRepository().find_latest_by_updated_at() is None

    def test_find_with_filters_order_and_limit(self, make_contest, fixed_now):
        for days in (1, 2, 3):
            make_contest(name=f"C{days}", date=fixed_now + timedelta(days=days))

        found = ContestRepository().find(
            {"date__gt": fixed_now + timedelta(days=1)}, order_by=("-date",), limit=1
        )

        assert [c.name for c in found] == ["C3"]

    def test_find_upcoming_and_past_split_on_now(self, make_contest, fixed_now):
        make_contest(name="Now", date=fixed_now)
        make_contest(name="Later", date=fixed_now + timedelta(hours=1))
        make_contest(name="Earlier", date=fixed_now - timedelta(hours=1))
        make_contest(name="Much earlier", date=fixed_now - timedelta(days=1))

        repo = ContestRepository()

        assert [c.name for c in repo.find_upcoming(fixed_now)] == ["Now", "Later"]
        assert [c.name for c in repo.find_past(fixed_now)] == ["Earlier", "Much earlier"]
        assert [c.name for c in repo.find_past(fixed_now, limit=1)] == ["Earlier"]


@pytest.mark.django_db
class TestTransientErrors:
    """Retries on OperationalError, then PersistenceFailure."""

    def test_transient_error_is_retried(self, fixed_now):
        original = Contest.objects.update_or_create
        calls = {"n": 0}

        def flaky(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("server closed the connection unexpectedly")
            return original(*args, **kwargs)

        with patch.object(Contest.objects, "update_or_create", side_effect=flaky):
            contest = ContestRepository(max_retries=2, retry_delay=0).upsert(
                "Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now
            )

        assert calls["n"] == 2
        assert contest.pk is not None

    def test_persistent_error_raises_persistence_failure(self, fixed_now):
        with patch.object(
            Contest.objects, "update_or_create", side_effect=OperationalError("database is locked")
        ) as mock_upsert:
            with pytest.raises(PersistenceFailure):
                ContestRepository(max_retries=2, retry_delay=0).upsert(
                    "Round 1000", Platform.CODEFORCES, _defaults(fixed_now), fixed_now
                )

        assert mock_upsert.call_count == 3
