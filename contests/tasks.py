"""
Celery tasks for the contest tracker.

- refresh_contests: run a refresh cycle on a worker, either forced or only
  when stored data is stale

Queued by the refresh API endpoint and the admin action. Nothing schedules
it periodically.
"""

import logging
from typing import Any, Dict, List, Optional

from celery import shared_task
from django.utils import timezone

from contests.services.aggregator import ContestAggregator
from contests.sources import get_configured_sources

logger = logging.getLogger(__name__)


@shared_task(name="contests.tasks.refresh_contests")
def refresh_contests(force: bool = False, sources: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Refresh stored contests from the contest sources.

    Args:
        force: Refresh even when stored data is still fresh
        sources: Source names to use instead of settings.CONTESTS_SOURCES

    Returns:
        Dict with whether a refresh ran and, if so, its per-source counts
    """
    started_at = timezone.now()
    selected = get_configured_sources(sources) if sources else None
    aggregator = ContestAggregator(sources=selected)

    if force:
        summary = aggregator.refresh(started_at)
        logger.info(f"Forced contest refresh finished: {summary.to_dict()}")
        return {"refreshed": True, **summary.to_dict()}

    feed = aggregator.get_contests(started_at)
    logger.info(
        f"Contest refresh check finished (refreshed={feed.refreshed}, "
        f"{len(feed.upcoming)} upcoming, {len(feed.past)} past)"
    )
    return {
        "refreshed": feed.refreshed,
        "upcoming": len(feed.upcoming),
        "past": len(feed.past),
    }
