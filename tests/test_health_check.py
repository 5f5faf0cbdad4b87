"""
Tests for the health check endpoint.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import OperationalError
from django.utils import timezone

from contests.models import Contest, Platform


@pytest.mark.django_db
class TestHealthCheck:

    def test_healthy_with_fresh_contests(self, client):
        updated = timezone.now() - timedelta(minutes=5)
        Contest.objects.create(
            name="Round 1",
            platform=Platform.CODEFORCES,
            date=timezone.now() + timedelta(days=1),
            link="https://codeforces.com/contest/1",
            updated_at=updated,
        )

        with patch("contests.views.get_celery_worker_count", return_value=2):
            response = client.get("/api/health/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["celery_workers"] == 2
        assert data["contest_count"] == 1
        assert data["data_stale"] is False
        assert data["last_refresh"] == updated.isoformat()

    def test_empty_store_is_stale(self, client):
        with patch("contests.views.get_celery_worker_count", return_value=0):
            response = client.get("/api/health/")

        data = response.json()
        assert data["last_refresh"] is None
        assert data["data_stale"] is True
        assert data["contest_count"] == 0

    def test_database_down_is_503(self, client):
        with patch("contests.views.connection") as mock_connection, \
                patch("contests.views.get_celery_worker_count", return_value=0):
            mock_connection.ensure_connection.side_effect = OperationalError("down")
            response = client.get("/api/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "error"
