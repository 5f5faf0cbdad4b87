"""
LeetCode Source - contests via an ordered chain of fetch strategies.

LeetCode has no stable public contest API, so the source tries, in order:

1. graphql       POST https://leetcode.com/graphql  allContests
                 (with Origin/Referer headers, which the endpoint expects)
2. contest_list  GET  https://leetcode.com/contest/api/list/
3. top_two       POST https://leetcode.com/graphql  topTwoContests
                 (degraded: upcoming contests only, plain headers)

The first strategy that returns rows wins. A strategy that raises
SourceUnavailable falls through to the next one; when all fail the source
yields nothing.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from contests.exceptions import SourceUnavailable
from contests.models import Platform
from contests.utils.freshness import within_retention
from contests.utils.normalization import (
    clean_text,
    derive_status,
    end_from_duration,
    from_unix_seconds,
)

from .base_source import BaseSource, ContestRecord, normalize_rows

logger = logging.getLogger(__name__)

LEETCODE_BASE_URL = "https://leetcode.com"
LEETCODE_GRAPHQL_URL = "https://leetcode.com/graphql"
LEETCODE_CONTEST_LIST_URL = "https://leetcode.com/contest/api/list/"
LEETCODE_CONTEST_URL = "https://leetcode.com/contest/{slug}"

ALL_CONTESTS_QUERY = """
query allContests {
  allContests {
    title
    titleSlug
    startTime
    duration
  }
}
"""

TOP_TWO_CONTESTS_QUERY = """
query topTwoContests {
  topTwoContests {
    title
    titleSlug
    startTime
    duration
  }
}
"""

GRAPHQL_HEADERS = {
    "Content-Type": "application/json",
    "Origin": LEETCODE_BASE_URL,
    "Referer": f"{LEETCODE_BASE_URL}/contest/",
}


def normalize_leetcode_contest(
    raw: Dict[str, Any],
    now: datetime,
    retention: Optional[timedelta] = None,
) -> Optional[ContestRecord]:
    """
    Map one LeetCode contest row to a ContestRecord.

    Accepts both the GraphQL field names (titleSlug, startTime) and the
    REST list names (title_slug, start_time).
    """
    title = clean_text(raw.get("title"))
    slug = clean_text(raw.get("titleSlug") or raw.get("title_slug"))
    start_value = raw.get("startTime")
    if start_value is None:
        start_value = raw.get("start_time")
    start = from_unix_seconds(start_value)

    if not title or not slug or start is None:
        return None

    end = end_from_duration(start, raw.get("duration"))
    if not within_retention(start, end, now, retention):
        return None

    return ContestRecord(
        name=title,
        platform=Platform.LEETCODE,
        date=start,
        link=LEETCODE_CONTEST_URL.format(slug=slug),
        end_time=end,
        status=derive_status(start, end, now),
    )


def _graphql_rows(payload: Any, field: str) -> List[Any]:
    if not isinstance(payload, dict):
        raise SourceUnavailable("leetcode", "GraphQL response is not a JSON object")
    if payload.get("errors"):
        raise SourceUnavailable("leetcode", f"GraphQL errors: {payload['errors']}")

    data = payload.get("data") or {}
    rows = data.get(field) if isinstance(data, dict) else None
    if not isinstance(rows, list):
        raise SourceUnavailable("leetcode", f"GraphQL response has no {field} list")
    return rows


class LeetCodeSource(BaseSource):
    """Weekly and biweekly contests from LeetCode."""

    SOURCE_NAME = "leetcode"
    PLATFORM = Platform.LEETCODE
    BASE_URL = LEETCODE_GRAPHQL_URL

    def strategies(self) -> List[Tuple[str, Callable]]:
        """Fetch strategies in the order they are tried."""
        return [
            ("graphql", self._fetch_all_contests),
            ("contest_list", self._fetch_contest_list),
            ("top_two", self._fetch_top_two),
        ]

    async def fetch_records(self, client, now: datetime) -> List[ContestRecord]:
        rows = await self.fetch_rows(client)
        return normalize_rows(
            rows,
            normalize_leetcode_contest,
            self.SOURCE_NAME,
            now=now,
            retention=self.retention,
        )

    async def fetch_rows(self, client) -> List[Any]:
        """
        Run the strategy chain and return the first successful raw rows.

        Raises:
            SourceUnavailable: When every strategy failed
        """
        failures = []

        for name, strategy in self.strategies():
            try:
                rows = await strategy(client)
            except SourceUnavailable as e:
                failures.append(f"{name}: {e.reason}")
                logger.warning(f"leetcode: {name} strategy failed ({e.reason}), trying next")
                continue

            logger.info(f"leetcode: {name} strategy returned {len(rows)} rows")
            return rows

        raise SourceUnavailable(
            self.SOURCE_NAME, "all strategies failed: " + "; ".join(failures)
        )

    async def _fetch_all_contests(self, client) -> List[Any]:
        payload = await client.post_json(
            LEETCODE_GRAPHQL_URL,
            {"query": ALL_CONTESTS_QUERY, "operationName": "allContests", "variables": {}},
            headers=GRAPHQL_HEADERS,
        )
        return _graphql_rows(payload, "allContests")

    async def _fetch_contest_list(self, client) -> List[Any]:
        payload = await client.get_json(LEETCODE_CONTEST_LIST_URL)
        rows = payload.get("contests") if isinstance(payload, dict) else None
        if not isinstance(rows, list):
            raise SourceUnavailable(self.SOURCE_NAME, "contest list has no contests array")
        return rows

    async def _fetch_top_two(self, client) -> List[Any]:
        payload = await client.post_json(
            LEETCODE_GRAPHQL_URL,
            {"query": TOP_TWO_CONTESTS_QUERY},
        )
        return _graphql_rows(payload, "topTwoContests")
