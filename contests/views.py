"""
Contest Tracker service views.

Includes health check endpoint for monitoring and load balancer checks.
"""

import logging

from django.db import DatabaseError, connection
from django.db.models import Max
from django.http import JsonResponse

from contests.models import Contest
from contests.utils.freshness import is_stale

logger = logging.getLogger(__name__)


def get_celery_worker_count():
    """
    Get the count of active Celery workers.

    Returns:
        int: Number of active workers, 0 if no broker or worker answers.
    """
    try:
        from config.celery import app as celery_app

        inspect = celery_app.control.inspect(timeout=1.0)
        active = inspect.active()
        if active:
            return len(active)
        return 0
    except Exception as e:
        logger.debug(f"Celery inspect failed: {e}")
        return 0


def health_check(request):
    """
    Health check endpoint for the contest tracker.

    Endpoint: GET /api/health/
    No authentication required (for load balancer checks).

    Response fields:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "error"
        - celery_workers: integer count of active workers
        - last_refresh: ISO timestamp of the most recent contest upsert
        - data_stale: whether the next feed request will trigger a refresh
        - contest_count: number of stored contests

    Returns:
        JsonResponse: HTTP 200 when healthy, HTTP 503 when the database is down
    """
    status = "healthy"
    http_status = 200

    # Check database connection
    database_status = "connected"
    try:
        connection.ensure_connection()
    except DatabaseError:
        database_status = "error"
        status = "unhealthy"
        http_status = 503

    celery_workers = get_celery_worker_count()

    last_refresh = None
    data_stale = True
    contest_count = 0

    if database_status == "connected":
        try:
            latest = Contest.objects.aggregate(latest=Max("updated_at"))["latest"]
            contest_count = Contest.objects.count()
            data_stale = is_stale(latest)
            last_refresh = latest.isoformat() if latest else None
        except DatabaseError as e:
            logger.warning(f"Health check could not read contests: {e}")

    response_data = {
        "status": status,
        "database": database_status,
        "celery_workers": celery_workers,
        "last_refresh": last_refresh,
        "data_stale": data_stale,
        "contest_count": contest_count,
    }

    return JsonResponse(response_data, status=http_status)
