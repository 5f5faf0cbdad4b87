"""
Freshness and retention windows for contest data.

Two windows govern the refresh cycle:
- Staleness: stored contests are refreshed from the sources once the most
  recent upsert is older than CONTESTS_STALENESS_SECONDS (default 1 hour).
  Exactly one hour old is still fresh.
- Retention: sources keep contests that have not ended, plus contests that
  ended within the trailing CONTESTS_RETENTION_DAYS (default 30 days).
  The cutoff itself is excluded.
"""

from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

DEFAULT_STALENESS_SECONDS = 60 * 60
DEFAULT_RETENTION_DAYS = 30


def staleness_window() -> timedelta:
    """Configured staleness window."""
    return timedelta(
        seconds=getattr(settings, "CONTESTS_STALENESS_SECONDS", DEFAULT_STALENESS_SECONDS)
    )


def retention_window() -> timedelta:
    """Configured retention window."""
    return timedelta(
        days=getattr(settings, "CONTESTS_RETENTION_DAYS", DEFAULT_RETENTION_DAYS)
    )


def is_stale(
    last_updated: Optional[datetime],
    now: Optional[datetime] = None,
    window: Optional[timedelta] = None,
) -> bool:
    """
    Decide whether stored contest data needs a refresh.

    Args:
        last_updated: updated_at of the most recently updated contest,
            None when nothing is stored yet
        now: Reference instant (defaults to timezone.now())
        window: Staleness window (defaults to the configured one)

    Returns:
        True when nothing is stored or the data is older than the window
    """
    if last_updated is None:
        return True

    now = now or timezone.now()
    window = window if window is not None else staleness_window()
    return now - last_updated > window


def retention_cutoff(now: Optional[datetime] = None, window: Optional[timedelta] = None) -> datetime:
    """Instant before which finished contests are dropped."""
    now = now or timezone.now()
    window = window if window is not None else retention_window()
    return now - window


def within_retention(
    start: datetime,
    end: Optional[datetime],
    now: Optional[datetime] = None,
    window: Optional[timedelta] = None,
) -> bool:
    """
    Check whether a contest belongs in the retention window.

    A contest is kept when it ends strictly after the cutoff. Contests that
    have not ended yet always qualify. Without a known end the start is used.
    """
    reference = end if end is not None else start
    return reference > retention_cutoff(now, window)
