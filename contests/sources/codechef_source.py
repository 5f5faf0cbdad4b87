"""
CodeChef Source - contests from the CodeChef contest list API.

Target URL: https://www.codechef.com/api/list/contests/all

The payload splits contests into three sections:
    present_contests -> ongoing
    future_contests  -> upcoming
    past_contests    -> finished

Depending on the API version a section is either a list of rows or a map
keyed by contest code. Rows carry ISO timestamps (contest_start_date_iso)
and/or legacy local-time strings (start_date, "07 Dec 2025  20:00:00" in IST).
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from django.conf import settings

from contests.exceptions import SourceUnavailable
from contests.models import ContestStatus, Platform
from contests.utils.freshness import within_retention
from contests.utils.normalization import CODECHEF_TZ, clean_text, parse_datetime_value

from .base_source import BaseSource, ContestRecord, normalize_rows

logger = logging.getLogger(__name__)

CODECHEF_API_URL = "https://www.codechef.com/api/list/contests/all"
CODECHEF_CONTEST_URL = "https://www.codechef.com/{code}"

SECTION_STATUS = {
    "present_contests": ContestStatus.ONGOING,
    "future_contests": ContestStatus.UPCOMING,
    "past_contests": ContestStatus.FINISHED,
}


def section_rows(section: Any) -> List[Any]:
    """Rows of a payload section, whether it arrived as a list or a keyed map."""
    if isinstance(section, list):
        return section
    if isinstance(section, dict):
        return list(section.values())
    return []


def _parse_codechef_date(value: Any) -> Optional[datetime]:
    return parse_datetime_value(value, default_tz=CODECHEF_TZ)


def normalize_codechef_contest(
    raw: Dict[str, Any],
    status: str,
    now: datetime,
    retention: Optional[timedelta] = None,
) -> Optional[ContestRecord]:
    """
    Map one CodeChef contest row to a ContestRecord.

    Args:
        raw: Row from one of the payload sections
        status: Status implied by the section the row came from
        now: Reference instant
        retention: Retention window override

    Returns:
        ContestRecord, or None when the row is incomplete or too old
    """
    name = clean_text(raw.get("contest_name") or raw.get("name"))
    code = clean_text(raw.get("contest_code") or raw.get("code"))
    start = _parse_codechef_date(raw.get("contest_start_date_iso")) or _parse_codechef_date(
        raw.get("start_date")
    )
    end = _parse_codechef_date(raw.get("contest_end_date_iso")) or _parse_codechef_date(
        raw.get("end_date")
    )

    if not name or not code or start is None:
        return None

    if status == ContestStatus.FINISHED and not within_retention(start, end, now, retention):
        return None

    return ContestRecord(
        name=name,
        platform=Platform.CODECHEF,
        date=start,
        link=CODECHEF_CONTEST_URL.format(code=code),
        end_time=end,
        status=status,
    )


class CodeChefSource(BaseSource):
    """Present, future and recent past contests from CodeChef."""

    SOURCE_NAME = "codechef"
    PLATFORM = Platform.CODECHEF
    BASE_URL = CODECHEF_API_URL

    def __init__(self, past_limit: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self.past_limit = past_limit if past_limit is not None else getattr(
            settings, "CONTESTS_CODECHEF_PAST_LIMIT", 10
        )

    async def fetch_records(self, client, now: datetime) -> List[ContestRecord]:
        payload = await client.get_json(CODECHEF_API_URL)

        if not isinstance(payload, dict):
            raise SourceUnavailable(self.SOURCE_NAME, "response is not a JSON object")
        if payload.get("status") == "failure":
            raise SourceUnavailable(
                self.SOURCE_NAME, f"API reported failure: {payload.get('message', '')}"
            )
        if not any(section in payload for section in SECTION_STATUS):
            raise SourceUnavailable(self.SOURCE_NAME, "response has no contest sections")

        records = []
        for section, status in SECTION_STATUS.items():
            section_records = normalize_rows(
                section_rows(payload.get(section)),
                normalize_codechef_contest,
                self.SOURCE_NAME,
                status=status,
                now=now,
                retention=self.retention,
            )

            if status == ContestStatus.FINISHED:
                section_records.sort(key=lambda record: record.date, reverse=True)
                section_records = section_records[: self.past_limit]

            logger.debug(f"codechef: {len(section_records)} contests from {section}")
            records.extend(section_records)

        return records
