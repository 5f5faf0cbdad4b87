"""
Past Contests Source - scrapes a contest-aggregator HTML page.

Target URL: settings.PAST_CONTESTS_URL (the source is disabled when empty)

HTML Structure:
- Contest cards: .contest-card
- Contest title: .title
- End time: .end-time (text, or the datetime attribute of a <time> tag)
- Platform label: .platform
- Contest link: first a[href] inside the card

Every scraped contest has already ended, so its start and end are both the
scraped end instant and its status is finished.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from django.conf import settings

from contests.models import ContestStatus
from contests.utils.freshness import within_retention
from contests.utils.normalization import clean_text, normalize_platform, parse_datetime_value

from .base_source import BaseSource, ContestRecord, normalize_rows

logger = logging.getLogger(__name__)


def _element_text(element) -> str:
    if element is None:
        return ""
    return clean_text(element.get_text(" ", strip=True))


def _end_time_text(element) -> str:
    if element is None:
        return ""
    return clean_text(element.get("datetime") or element.get_text(" ", strip=True))


def _card_link(card) -> str:
    if card.name == "a" and card.get("href"):
        return card["href"].strip()
    anchor = card.select_one("a[href]")
    return anchor["href"].strip() if anchor else ""


def parse_contest_cards(html: str) -> List[Dict[str, str]]:
    """
    Extract raw contest cards from an aggregator page.

    Missing elements come back as empty strings; deciding what is usable is
    left to normalize_past_contest_card().

    Args:
        html: Page HTML

    Returns:
        List of {title, end_time, platform, link} dicts
    """
    soup = BeautifulSoup(html, "lxml")
    cards = []

    for card in soup.select(".contest-card"):
        cards.append({
            "title": _element_text(card.select_one(".title")),
            "end_time": _end_time_text(card.select_one(".end-time")),
            "platform": _element_text(card.select_one(".platform")),
            "link": _card_link(card),
        })

    return cards


def normalize_past_contest_card(
    card: Dict[str, Any],
    now: datetime,
    retention: Optional[timedelta] = None,
    page_url: str = "",
) -> Optional[ContestRecord]:
    """
    Map one scraped card to a ContestRecord.

    Args:
        card: Raw card from parse_contest_cards()
        now: Reference instant
        retention: Retention window override
        page_url: Page the card came from; relative links resolve against it

    Returns:
        ContestRecord, or None for cards without a title or parseable end time
    """
    name = clean_text(card.get("title"))
    end = parse_datetime_value(card.get("end_time"))
    if not name or end is None:
        return None

    if not within_retention(end, end, now, retention):
        return None

    href = card.get("link") or ""
    link = urljoin(page_url, href) if href else page_url
    if not link:
        return None

    return ContestRecord(
        name=name,
        platform=normalize_platform(card.get("platform", "")),
        date=end,
        link=link,
        end_time=end,
        status=ContestStatus.FINISHED,
    )


class PastContestsSource(BaseSource):
    """Recently finished contests scraped from an aggregator page."""

    SOURCE_NAME = "past_contests"
    FILL_ONLY = True

    def __init__(self, url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url if url is not None else getattr(settings, "PAST_CONTESTS_URL", "")
        self.BASE_URL = self.url

    async def fetch_records(self, client, now: datetime) -> List[ContestRecord]:
        if not self.url:
            logger.debug("past_contests: PAST_CONTESTS_URL not set, source disabled")
            return []

        html = await client.get_text(self.url, headers={"Accept": "text/html"})
        cards = parse_contest_cards(html)
        logger.debug(f"past_contests: {len(cards)} cards on {self.url}")

        return normalize_rows(
            cards,
            normalize_past_contest_card,
            self.SOURCE_NAME,
            now=now,
            retention=self.retention,
            page_url=self.url,
        )
