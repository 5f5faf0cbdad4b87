"""
Pytest configuration and fixtures for the Contest Tracker test suite.
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest


@pytest.fixture(scope="session")
def django_db_setup(django_db_blocker):
    """Configure the test database and run migrations."""
    from django.core.management import call_command

    with django_db_blocker.unblock():
        call_command("migrate", "--run-syncdb", verbosity=0)


@pytest.fixture(autouse=True)
def clear_cache():
    """Reset the locmem cache so throttle counters don't leak between tests."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def fixed_now():
    """Reference instant used by time-sensitive tests."""
    return datetime(2025, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """Create a test API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(db):
    """Create a regular user."""
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="contestant",
        email="contestant@test.com",
        password="testpass123",
    )


@pytest.fixture
def staff_user(db):
    """Create a staff user for admin-only endpoints."""
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="organizer",
        email="organizer@test.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def user_client(api_client, user):
    """API client logged in as a regular user."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def staff_client(api_client, staff_user):
    """API client logged in as a staff user."""
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def make_contest(db, fixed_now):
    """Factory for stored Contest rows."""
    from contests.models import Contest, Platform

    counter = {"n": 0}

    def _make(name=None, platform=Platform.CODEFORCES, date=None, **kwargs):
        counter["n"] += 1
        defaults = {
            "link": f"https://example.com/contest/{counter['n']}",
            "updated_at": fixed_now,
        }
        defaults.update(kwargs)
        return Contest.objects.create(
            name=name or f"Test Contest {counter['n']}",
            platform=platform,
            date=date or fixed_now + timedelta(days=1),
            **defaults,
        )

    return _make


class FakeSource:
    """Stand-in source returning canned records, or raising."""

    def __init__(self, name, records=None, error=None, delay=0, fill_only=False):
        self.SOURCE_NAME = name
        self.FILL_ONLY = fill_only
        self.records = records or []
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch(self, now=None):
        import asyncio

        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.records)


@pytest.fixture
def fake_source():
    """Factory for FakeSource instances."""
    return FakeSource
