"""
Codeforces Source - contests from the official Codeforces API.

Target URL: https://codeforces.com/api/contest.list

Response shape:
    {"status": "OK", "result": [{"id", "name", "phase",
                                 "startTimeSeconds", "durationSeconds"}, ...]}

Timestamps are Unix seconds. The API lists every contest ever held, so the
retention window does most of the filtering here.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from contests.models import ContestStatus, Platform
from contests.utils.freshness import within_retention
from contests.utils.normalization import (
    clean_text,
    derive_status,
    end_from_duration,
    from_unix_seconds,
)
from contests.exceptions import SourceUnavailable

from .base_source import BaseSource, ContestRecord, normalize_rows

logger = logging.getLogger(__name__)

CODEFORCES_API_URL = "https://codeforces.com/api/contest.list"
CODEFORCES_CONTEST_URL = "https://codeforces.com/contest/{id}"

# Phases that mean the contest has not ended yet
ACTIVE_PHASES = {"BEFORE", "CODING", "PENDING_SYSTEM_TEST", "SYSTEM_TEST"}


def phase_to_status(phase: str) -> Optional[str]:
    """Map a Codeforces phase to a contest status, None for unknown phases."""
    if phase == "BEFORE":
        return ContestStatus.UPCOMING
    if phase == "FINISHED":
        return ContestStatus.FINISHED
    if phase in ACTIVE_PHASES:
        return ContestStatus.ONGOING
    return None


def normalize_codeforces_contest(
    raw: Dict[str, Any],
    now: datetime,
    retention: Optional[timedelta] = None,
) -> Optional[ContestRecord]:
    """
    Map one Codeforces contest row to a ContestRecord.

    Args:
        raw: Row from the ``result`` array
        now: Reference instant
        retention: Retention window override

    Returns:
        ContestRecord, or None when the row is incomplete or too old
    """
    name = clean_text(raw.get("name"))
    contest_id = raw.get("id")
    start = from_unix_seconds(raw.get("startTimeSeconds"))
    if not name or contest_id is None or start is None:
        return None

    end = end_from_duration(start, raw.get("durationSeconds"))
    phase = raw.get("phase") or ""

    if phase not in ACTIVE_PHASES and not within_retention(start, end, now, retention):
        return None

    status = phase_to_status(phase) or derive_status(start, end, now)

    return ContestRecord(
        name=name,
        platform=Platform.CODEFORCES,
        date=start,
        link=CODEFORCES_CONTEST_URL.format(id=contest_id),
        end_time=end,
        status=status,
    )


class CodeforcesSource(BaseSource):
    """Upcoming, running and recently finished contests from Codeforces."""

    SOURCE_NAME = "codeforces"
    PLATFORM = Platform.CODEFORCES
    BASE_URL = CODEFORCES_API_URL

    async def fetch_records(self, client, now: datetime) -> List[ContestRecord]:
        payload = await client.get_json(CODEFORCES_API_URL)

        if not isinstance(payload, dict) or payload.get("status") != "OK":
            comment = payload.get("comment") if isinstance(payload, dict) else None
            raise SourceUnavailable(
                self.SOURCE_NAME, f"API returned non-OK status: {comment or 'no comment'}"
            )

        rows = payload.get("result")
        if not isinstance(rows, list):
            raise SourceUnavailable(self.SOURCE_NAME, "response has no result list")

        return normalize_rows(
            rows,
            normalize_codeforces_contest,
            self.SOURCE_NAME,
            now=now,
            retention=self.retention,
        )
