"""
Contest repository over the Django ORM.

All contest reads and writes made by the refresh pipeline go through here:
- upsert(): insert-or-update keyed by (name, platform)
- insert_missing(): insert only, for fill-only sources
- find(): filtered, ordered, limited reads
- find_latest_by_updated_at(): the staleness check

Transient database errors (OperationalError, InterfaceError) are retried
with linear backoff. When retries run out PersistenceFailure is raised and
the caller's request fails.
"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction

from contests.exceptions import PersistenceFailure
from contests.models import Contest

logger = logging.getLogger(__name__)

# Fields the upsert is allowed to write; solution_link belongs to admins
UPSERT_FIELDS = ("date", "end_time", "link", "status")


class ContestRepository:
    """Persistence operations for Contest."""

    def __init__(self, max_retries: Optional[int] = None, retry_delay: Optional[float] = None):
        self.max_retries = max_retries if max_retries is not None else getattr(
            settings, "CONTESTS_DB_MAX_RETRIES", 3
        )
        self.retry_delay = retry_delay if retry_delay is not None else getattr(
            settings, "CONTESTS_DB_RETRY_DELAY", 0.5
        )

    def _run(self, operation: str, func: Callable[[], Any]) -> Any:
        """
        Run a database operation, retrying transient connection errors.

        Raises:
            PersistenceFailure: When the operation still fails after retries
        """
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            try:
                return func()
            except (OperationalError, InterfaceError) as e:
                if attempt == attempts - 1:
                    logger.error(f"Repository {operation} failed after {attempts} attempts: {e}")
                    raise PersistenceFailure(f"{operation} failed: {e}") from e

                logger.warning(
                    f"Repository {operation} failed (attempt {attempt + 1}/{attempts}): {e}"
                )
                if self.retry_delay:
                    time.sleep(self.retry_delay * (attempt + 1))

    def upsert(self, name: str, platform: str, defaults: Dict[str, Any], now: datetime) -> Contest:
        """
        Insert or update the contest identified by (name, platform).

        updated_at is set to ``now`` on every call, whether or not any field
        changed. solution_link is never written here.

        Args:
            name: Contest name
            platform: Platform value
            defaults: New field values (keys outside UPSERT_FIELDS are ignored)
            now: Refresh instant

        Returns:
            The stored Contest
        """
        values = {key: defaults[key] for key in UPSERT_FIELDS if key in defaults}
        values["updated_at"] = now

        def _upsert():
            with transaction.atomic():
                contest, created = Contest.objects.update_or_create(
                    name=name, platform=platform, defaults=values
                )
            if created:
                logger.debug(f"Created contest {contest}")
            return contest

        return self._run("upsert", _upsert)

    def insert_missing(
        self, name: str, platform: str, defaults: Dict[str, Any], now: datetime
    ) -> bool:
        """
        Insert the contest only if (name, platform) is not stored yet.

        An existing row keeps its fields; only updated_at moves to ``now``.

        Returns:
            True when a new row was created
        """
        values = {key: defaults[key] for key in UPSERT_FIELDS if key in defaults}
        values["updated_at"] = now

        def _insert():
            with transaction.atomic():
                contest, created = Contest.objects.get_or_create(
                    name=name, platform=platform, defaults=values
                )
                if not created:
                    contest.updated_at = now
                    contest.save(update_fields=["updated_at"])
            return created

        return self._run("insert_missing", _insert)

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> List[Contest]:
        """
        Query contests.

        Args:
            filters: Django lookup kwargs, e.g. {"date__gte": now}
            order_by: Ordering expressions, e.g. ("-date",)
            limit: Maximum rows

        Returns:
            Matching contests
        """
        def _find():
            queryset = Contest.objects.filter(**(filters or {}))
            if order_by:
                queryset = queryset.order_by(*order_by)
            if limit is not None:
                queryset = queryset[:limit]
            return list(queryset)

        return self._run("find", _find)

    def find_latest_by_updated_at(self) -> Optional[Contest]:
        """Most recently updated contest, None when the store is empty."""
        return self._run(
            "find_latest_by_updated_at",
            lambda: Contest.objects.order_by("-updated_at").first(),
        )

    def find_upcoming(self, now: datetime) -> List[Contest]:
        """Contests starting at or after ``now``, soonest first."""
        return self.find({"date__gte": now}, order_by=("date",))

    def find_past(self, now: datetime, limit: Optional[int] = None) -> List[Contest]:
        """Contests that started before ``now``, most recent first."""
        return self.find({"date__lt": now}, order_by=("-date",), limit=limit)

    def count(self) -> int:
        return self._run("count", lambda: Contest.objects.count())
