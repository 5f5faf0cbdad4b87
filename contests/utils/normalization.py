"""
Normalization helpers shared by the contest sources.

Platforms report instants in different shapes: Unix seconds (Codeforces,
LeetCode), ISO-8601 strings with offsets (CodeChef *_iso fields), and
CodeChef's legacy "07 Dec 2025  20:00:00" local-time strings. Everything is
converted to timezone-aware UTC datetimes here.
"""

import re
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from contests.models import ContestStatus, Platform

# CodeChef publishes legacy dates in Indian Standard Time
CODECHEF_TZ = ZoneInfo("Asia/Kolkata")

LEGACY_DATE_FORMATS = [
    "%d %b %Y %H:%M:%S",
    "%d %B %Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
]

PLATFORM_ALIASES = {
    "codeforces": Platform.CODEFORCES,
    "codeforces.com": Platform.CODEFORCES,
    "codechef": Platform.CODECHEF,
    "codechef.com": Platform.CODECHEF,
    "leetcode": Platform.LEETCODE,
    "leetcode.com": Platform.LEETCODE,
}


def from_unix_seconds(value: Any) -> Optional[datetime]:
    """Convert Unix seconds (int, float or numeric string) to an aware UTC datetime."""
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(float(value), tz=dt_timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def parse_datetime_value(value: Any, default_tz=dt_timezone.utc) -> Optional[datetime]:
    """
    Parse an ISO-8601 or legacy date string into an aware UTC datetime.

    Args:
        value: String to parse; empty or None yields None
        default_tz: Zone assumed when the string carries no offset

    Returns:
        Aware datetime in UTC, or None when the value cannot be parsed
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    # fromisoformat only learned the "Z" suffix in Python 3.11
    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(iso_text)
    except ValueError:
        parsed = None

    if parsed is None:
        collapsed = re.sub(r"\s+", " ", text)
        for fmt in LEGACY_DATE_FORMATS:
            try:
                parsed = datetime.strptime(collapsed, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed.astimezone(dt_timezone.utc)


def end_from_duration(start: datetime, duration_seconds: Any) -> Optional[datetime]:
    """End instant from a start and a duration in seconds, None if the duration is unusable."""
    try:
        seconds = float(duration_seconds)
    except (TypeError, ValueError):
        return None
    if seconds < 0:
        return None
    return start + timedelta(seconds=seconds)


def derive_status(start: datetime, end: Optional[datetime], now: datetime) -> str:
    """
    Derive a status for platforms that don't report one.

    upcoming when the contest starts after ``now``, finished when a known
    end is at or before ``now``, ongoing otherwise.
    """
    if start > now:
        return ContestStatus.UPCOMING
    if end is not None and end <= now:
        return ContestStatus.FINISHED
    return ContestStatus.ONGOING


def normalize_platform(text: str) -> str:
    """Map free-text platform labels (as scraped) to Platform choices."""
    key = (text or "").strip().lower()
    if not key:
        return Platform.OTHER
    return PLATFORM_ALIASES.get(key, Platform.OTHER)


def clean_text(value: Any) -> str:
    """Collapse whitespace in a scraped or API-provided string."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()
