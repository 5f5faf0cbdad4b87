"""
Contest Aggregator - the refresh coordinator behind the contest feed.

One call to get_contests() runs this cycle:

1. Staleness check: refresh only when nothing is stored or the most recent
   upsert is older than the staleness window
2. Fetch: every source concurrently, each bounded by a per-source timeout
3. Merge & persist: de-duplicate by (name, platform), upsert each record;
   fill-only sources (the scraper) only add contests no API reported
4. Partition: upcoming (date >= now, ascending) and past (date < now,
   descending, capped)
5. Enrich: attach matching solution videos to the past contests

Source failures degrade the feed; repository failures propagate to the
caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from asgiref.sync import async_to_sync, sync_to_async
from django.conf import settings
from django.utils import timezone

from contests.models import Contest
from contests.monitoring import capture_source_failure
from contests.sources import BaseSource, ContestRecord, get_configured_sources
from contests.utils.freshness import is_stale

from .repository import ContestRepository
from .solution_matcher import SolutionMatcher
from .video_client import YouTubeClient

logger = logging.getLogger(__name__)


@dataclass
class AggregatorConfig:
    """Tunables for one ContestAggregator."""

    staleness: timedelta = timedelta(hours=1)
    source_timeout: float = 45.0
    past_limit: int = 50

    @classmethod
    def from_settings(cls) -> "AggregatorConfig":
        return cls(
            staleness=timedelta(seconds=getattr(settings, "CONTESTS_STALENESS_SECONDS", 3600)),
            source_timeout=float(getattr(settings, "CONTESTS_SOURCE_TIMEOUT", 45)),
            past_limit=int(getattr(settings, "CONTESTS_PAST_LIMIT", 50)),
        )


@dataclass
class ContestFeed:
    """Result of get_contests()."""

    upcoming: List[Contest]
    past: List[Contest]
    refreshed: bool = False


@dataclass
class RefreshSummary:
    """Outcome of one fetch-and-persist cycle."""

    fetched: int = 0
    persisted: int = 0
    per_source: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "fetched": self.fetched,
            "persisted": self.persisted,
            "per_source": dict(self.per_source),
        }


def _source_name(source) -> str:
    return getattr(source, "SOURCE_NAME", type(source).__name__)


def dedupe_records(records: Iterable[ContestRecord]) -> List[ContestRecord]:
    """Collapse records sharing (name, platform); the last one wins."""
    batch: Dict[Tuple[str, str], ContestRecord] = {}
    for record in records:
        batch[record.key] = record
    return list(batch.values())


class ContestAggregator:
    """
    Coordinates sources, repository and solution matching.

    All collaborators are injected; omitted ones are built from settings.

    Usage:
        aggregator = ContestAggregator()
        feed = aggregator.get_contests()
    """

    def __init__(
        self,
        config: Optional[AggregatorConfig] = None,
        sources: Optional[List[BaseSource]] = None,
        repository: Optional[ContestRepository] = None,
        video_client: Optional[YouTubeClient] = None,
        matcher: Optional[SolutionMatcher] = None,
    ):
        self.config = config or AggregatorConfig.from_settings()
        self.sources = sources if sources is not None else get_configured_sources()
        self.repository = repository or ContestRepository()
        self.video_client = video_client or YouTubeClient()
        self.matcher = matcher or SolutionMatcher()

    # Feed

    def get_contests(self, now: Optional[datetime] = None) -> ContestFeed:
        """Synchronous entry point for views, tasks and commands."""
        return async_to_sync(self.aget_contests)(now)

    async def aget_contests(self, now: Optional[datetime] = None) -> ContestFeed:
        """
        Return the contest feed, refreshing stored contests first when stale.

        Args:
            now: Reference instant (defaults to timezone.now())

        Returns:
            ContestFeed with upcoming and past contests

        Raises:
            PersistenceFailure: When the repository is unreachable
        """
        now = now or timezone.now()

        refreshed = False
        if await self.needs_refresh(now):
            await self.arefresh(now)
            refreshed = True

        upcoming, past = await sync_to_async(self.partition)(now)
        past = await self.enrich(past)

        return ContestFeed(upcoming=upcoming, past=past, refreshed=refreshed)

    async def needs_refresh(self, now: datetime) -> bool:
        """Whether stored contests are missing or older than the staleness window."""
        latest = await sync_to_async(self.repository.find_latest_by_updated_at)()
        last_updated = latest.updated_at if latest else None

        stale = is_stale(last_updated, now, self.config.staleness)
        if stale:
            logger.info(f"Contest data stale (last update: {last_updated}), refreshing")
        else:
            logger.debug(f"Contest data fresh (last update: {last_updated})")
        return stale

    def partition(self, now: datetime) -> Tuple[List[Contest], List[Contest]]:
        """Split stored contests into upcoming (ascending) and past (descending, capped)."""
        upcoming = self.repository.find_upcoming(now)
        past = self.repository.find_past(now, limit=self.config.past_limit)
        return upcoming, past

    async def enrich(self, past: List[Contest]) -> List[Contest]:
        """Attach solution video links to past contests."""
        if not past:
            return past

        # requests is blocking; keep it off the event loop thread
        videos = await sync_to_async(self.video_client.fetch_videos, thread_sensitive=False)()
        return self.matcher.match(past, videos)

    # Refresh

    def refresh(self, now: Optional[datetime] = None) -> RefreshSummary:
        """Synchronous forced refresh, regardless of staleness."""
        return async_to_sync(self.arefresh)(now)

    async def arefresh(self, now: Optional[datetime] = None) -> RefreshSummary:
        """
        Fetch every source and upsert the results.

        Returns:
            RefreshSummary with per-source record counts
        """
        now = now or timezone.now()

        results = await self.fetch_all(now)
        fill_only_names = {
            _source_name(source) for source in self.sources if getattr(source, "FILL_ONLY", False)
        }

        records, fill_records = [], []
        for name, source_records in results.items():
            if name in fill_only_names:
                fill_records.extend(source_records)
            else:
                records.extend(source_records)

        persisted = await sync_to_async(self.persist)(records, now, fill_records)

        summary = RefreshSummary(
            fetched=len(records) + len(fill_records),
            persisted=persisted,
            per_source={name: len(source_records) for name, source_records in results.items()},
        )
        logger.info(
            f"Refresh complete: {summary.fetched} fetched, {summary.persisted} upserted "
            f"({summary.per_source})"
        )
        return summary

    async def fetch_all(self, now: datetime) -> Dict[str, List[ContestRecord]]:
        """Fetch every source concurrently and wait for all of them."""
        results = await asyncio.gather(
            *(self._fetch_source(source, now) for source in self.sources)
        )

        by_source: Dict[str, List[ContestRecord]] = {}
        for source, records in zip(self.sources, results):
            by_source.setdefault(_source_name(source), []).extend(records)
        return by_source

    async def _fetch_source(self, source: BaseSource, now: datetime) -> List[ContestRecord]:
        name = _source_name(source)
        try:
            return await asyncio.wait_for(source.fetch(now), timeout=self.config.source_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"{name}: no result within {self.config.source_timeout}s, skipping")
            capture_source_failure(name, e)
            return []
        except Exception as e:
            # Sources are meant to absorb their own errors
            logger.exception(f"{name}: fetch raised, skipping: {e}")
            capture_source_failure(name, e)
            return []

    def persist(
        self,
        records: Iterable[ContestRecord],
        now: datetime,
        fill_records: Iterable[ContestRecord] = (),
    ) -> int:
        """
        Upsert a batch of records.

        Args:
            records: Records from platform APIs, upserted
            now: Refresh instant
            fill_records: Records from fill-only sources; inserted only when
                no API record in this batch has the key and nothing is stored

        Returns:
            Number of distinct (name, platform) keys written
        """
        batch = dedupe_records(records)
        for record in batch:
            self.repository.upsert(record.name, record.platform, record.to_defaults(), now)

        reported = {record.key for record in batch}
        fill_batch = [
            record for record in dedupe_records(fill_records) if record.key not in reported
        ]
        for record in fill_batch:
            self.repository.insert_missing(record.name, record.platform, record.to_defaults(), now)

        return len(batch) + len(fill_batch)
