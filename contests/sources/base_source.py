"""
Base Source for contest platform adapters.

This module provides the canonical record type every adapter produces and
the base class that gives each adapter its fail-soft boundary.

Each adapter:
1. Fetches its platform's contest list (API or HTML page)
2. Maps every raw row to a ContestRecord with a pure normalize function
3. Drops rows outside the retention window

fetch() never raises: network, status, payload and parsing failures are
logged and reported, and the adapter yields an empty list.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import httpx
from django.utils import timezone

from contests.exceptions import SourceUnavailable
from contests.fetchers.http_client import ContestHttpClient
from contests.models import Contest, Platform
from contests.monitoring import capture_source_failure

logger = logging.getLogger(__name__)


@dataclass
class ContestRecord:
    """
    Canonical contest shape produced by every source.

    Attributes:
        name: Contest title as published by the platform
        platform: Platform choice value (Codeforces, CodeChef, LeetCode, Other)
        date: Start instant (aware, UTC)
        link: Contest page URL
        end_time: End instant when known
        status: upcoming / ongoing / finished, or "" when unknown
    """

    name: str
    platform: str
    date: datetime
    link: str
    end_time: Optional[datetime] = None
    status: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        """Identity used for upserts."""
        return (self.name, self.platform)

    def to_defaults(self) -> Dict[str, Any]:
        """Field values written on upsert (identity fields excluded)."""
        return {
            "date": self.date,
            "end_time": self.end_time,
            "link": self.link,
            "status": self.status,
        }


class BaseSource(ABC):
    """
    Abstract base class for contest sources.

    Subclasses implement fetch_records(); the public fetch() wraps it with
    an HTTP client and the fail-soft error boundary.
    """

    SOURCE_NAME: str = "unknown"
    PLATFORM: str = Platform.OTHER
    BASE_URL: str = ""
    # Fill-only sources add contests no platform API reported; they never
    # overwrite fields of a contest that is already stored
    FILL_ONLY: bool = False

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retention: Optional[timedelta] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the source.

        Args:
            timeout: Per-request timeout in seconds (default from settings)
            max_retries: Retries per request (default from settings)
            retention: Retention window override (default from settings)
            transport: Optional httpx transport, used by tests
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.retention = retention
        self.transport = transport

    def _client(self) -> ContestHttpClient:
        return ContestHttpClient(
            self.SOURCE_NAME,
            timeout=self.timeout,
            max_retries=self.max_retries,
            transport=self.transport,
        )

    async def fetch(self, now: Optional[datetime] = None) -> List[ContestRecord]:
        """
        Fetch and normalize this source's contests.

        Args:
            now: Reference instant for retention and status (defaults to now)

        Returns:
            Normalized records, or an empty list when the source failed
        """
        now = now or timezone.now()

        try:
            async with self._client() as client:
                records = await self.fetch_records(client, now)
        except SourceUnavailable as e:
            logger.warning(f"{self.SOURCE_NAME}: source unavailable, skipping ({e.reason})")
            capture_source_failure(self.SOURCE_NAME, e, url=self.BASE_URL)
            return []
        except Exception as e:
            logger.exception(f"{self.SOURCE_NAME}: unexpected error, skipping: {e}")
            capture_source_failure(self.SOURCE_NAME, e, url=self.BASE_URL)
            return []

        logger.info(f"{self.SOURCE_NAME}: {len(records)} contests after normalization")
        return records

    @abstractmethod
    async def fetch_records(
        self, client: ContestHttpClient, now: datetime
    ) -> List[ContestRecord]:
        """
        Fetch raw rows and normalize them.

        May raise SourceUnavailable (or anything else); fetch() absorbs it.

        Args:
            client: Open HTTP client for this fetch
            now: Reference instant

        Returns:
            Normalized records inside the retention window
        """
        pass


def fits_columns(record: ContestRecord) -> bool:
    """Whether name and link fit their Contest columns."""
    for field_name in ("name", "link"):
        max_length = Contest._meta.get_field(field_name).max_length
        if max_length and len(getattr(record, field_name)) > max_length:
            return False
    return True


def normalize_rows(rows, normalize, source_name: str, **kwargs) -> List[ContestRecord]:
    """
    Apply a normalize function to raw rows, skipping rows it rejects.

    Non-dict rows are skipped. A row that makes the normalizer raise is
    logged and skipped so one bad row can't empty the whole source.
    Records whose name or link is longer than its column are skipped too.
    """
    records = []
    skipped = 0

    for row in rows:
        if not isinstance(row, dict):
            skipped += 1
            continue
        try:
            record = normalize(row, **kwargs)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"{source_name}: malformed row skipped: {e}")
            record = None
        if record is None:
            skipped += 1
            continue
        if not fits_columns(record):
            logger.warning(f"{source_name}: over-length name or link skipped: {record.name[:80]!r}")
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug(f"{source_name}: {skipped} rows skipped (filtered or malformed)")
    return records


def get_source(name: str, **kwargs) -> BaseSource:
    """
    Factory function to get a source by name.

    Args:
        name: Source name (case-insensitive), e.g. 'codeforces', 'leetcode'
        **kwargs: Passed to the source constructor

    Returns:
        Source instance

    Raises:
        ValueError: If the name is not recognized
    """
    # Import here to avoid circular imports
    from .codeforces_source import CodeforcesSource
    from .codechef_source import CodeChefSource
    from .leetcode_source import LeetCodeSource
    from .past_contests_source import PastContestsSource

    sources = {
        "codeforces": CodeforcesSource,
        "codechef": CodeChefSource,
        "leetcode": LeetCodeSource,
        "past_contests": PastContestsSource,
    }

    name_lower = name.strip().lower()
    if name_lower not in sources:
        raise ValueError(f"Unknown source: {name}. Available sources: {list(sources.keys())}")

    return sources[name_lower](**kwargs)


def get_configured_sources(names: Optional[List[str]] = None) -> List[BaseSource]:
    """
    Instantiate the sources named in settings.CONTESTS_SOURCES.

    Unknown names are logged and skipped so a typo in the environment does
    not take the whole refresh down.
    """
    from django.conf import settings

    if names is None:
        names = getattr(
            settings, "CONTESTS_SOURCES", ["codeforces", "codechef", "leetcode", "past_contests"]
        )

    sources = []
    for name in names:
        try:
            sources.append(get_source(name))
        except ValueError as e:
            logger.error(f"Skipping configured source: {e}")
    return sources
