"""
Tests for PastContestsSource.

Parses a small aggregator page fixture with BeautifulSoup and checks card
extraction, tolerance of missing elements, platform mapping and retention.
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import httpx
import pytest

from contests.models import ContestStatus, Platform
from contests.sources.past_contests_source import (
    PastContestsSource,
    normalize_past_contest_card,
    parse_contest_cards,
)

PAGE_URL = "https://contests.example.com/past"

SAMPLE_HTML = """
<html>
  <body>
    <div class="contest-list">
      <div class="contest-card">
        <h3 class="title">Codeforces Round 990 (Div. 1)</h3>
        <span class="platform">Codeforces</span>
        <time class="end-time" datetime="2025-06-10T16:35:00Z">June 10</time>
        <a href="https://codeforces.com/contest/2046">View</a>
      </div>
      <div class="contest-card">
        <h3 class="title">  Weekly   Contest 449 </h3>
        <span class="platform">LEETCODE</span>
        <span class="end-time">2025-06-08T04:00:00+00:00</span>
        <a href="/contest/weekly-contest-449">View</a>
      </div>
      <div class="contest-card">
        <h3 class="title">Obscure Judge Cup</h3>
        <span class="platform">SomeJudge</span>
        <span class="end-time">2025-06-01 10:00:00</span>
      </div>
      <div class="contest-card">
        <span class="platform">CodeChef</span>
        <span class="end-time">2025-06-05T10:00:00Z</span>
      </div>
      <div class="contest-card">
        <h3 class="title">No End Time</h3>
      </div>
    </div>
  </body>
</html>
"""


class TestParseContestCards:
    """Raw card extraction."""

    def test_extracts_every_card(self):
        cards = parse_contest_cards(SAMPLE_HTML)

        assert len(cards) == 5
        assert cards[0] == {
            "title": "Codeforces Round 990 (Div. 1)",
            "end_time": "2025-06-10T16:35:00Z",
            "platform": "Codeforces",
            "link": "https://codeforces.com/contest/2046",
        }

    def test_missing_elements_are_empty_strings(self):
        cards = parse_contest_cards(SAMPLE_HTML)

        assert cards[2]["link"] == ""
        assert cards[3]["title"] == ""
        assert cards[4]["end_time"] == ""
        assert cards[4]["platform"] == ""

    def test_page_without_cards(self):
        assert parse_contest_cards("<html><body><p>Nothing here</p></body></html>") == []


class TestNormalizePastContestCard:
    """Card to ContestRecord mapping."""

    def test_date_and_end_are_the_end_instant(self, fixed_now):
        card = parse_contest_cards(SAMPLE_HTML)[0]

        record = normalize_past_contest_card(card, fixed_now, page_url=PAGE_URL)

        end = datetime(2025, 6, 10, 16, 35, tzinfo=dt_timezone.utc)
        assert record.date == end
        assert record.end_time == end
        assert record.status == ContestStatus.FINISHED
        assert record.platform == Platform.CODEFORCES

    def test_platform_text_is_case_insensitive(self, fixed_now):
        card = parse_contest_cards(SAMPLE_HTML)[1]

        record = normalize_past_contest_card(card, fixed_now, page_url=PAGE_URL)

        assert record.name == "Weekly Contest 449"
        assert record.platform == Platform.LEETCODE
        assert record.link == "https://contests.example.com/contest/weekly-contest-449"

    def test_unknown_platform_maps_to_other(self, fixed_now):
        card = parse_contest_cards(SAMPLE_HTML)[2]

        record = normalize_past_contest_card(card, fixed_now, page_url=PAGE_URL)

        assert record.platform == Platform.OTHER
        # No link in the card: fall back to the page itself
        assert record.link == PAGE_URL

    def test_card_without_title_or_end_is_skipped(self, fixed_now):
        cards = parse_contest_cards(SAMPLE_HTML)

        assert normalize_past_contest_card(cards[3], fixed_now, page_url=PAGE_URL) is None
        assert normalize_past_contest_card(cards[4], fixed_now, page_url=PAGE_URL) is None

    def test_retention_window_applies(self, fixed_now):
        card = {
            "title": "Long Ago Round",
            "end_time": (fixed_now - timedelta(days=30, seconds=1)).isoformat(),
            "platform": "Codeforces",
            "link": "https://codeforces.com/contest/1",
        }

        assert normalize_past_contest_card(card, fixed_now) is None


class TestPastContestsSourceFetch:
    """fetch() against a mocked page."""

    @pytest.mark.asyncio
    async def test_fetch_parses_page(self, fixed_now):
        def handler(request):
            assert str(request.url) == PAGE_URL
            return httpx.Response(200, text=SAMPLE_HTML, headers={"Content-Type": "text/html"})

        source = PastContestsSource(url=PAGE_URL, transport=httpx.MockTransport(handler))
        records = await source.fetch(fixed_now)

        assert [r.name for r in records] == [
            "Codeforces Round 990 (Div. 1)",
            "Weekly Contest 449",
            "Obscure Judge Cup",
        ]

    @pytest.mark.asyncio
    async def test_disabled_without_url(self, fixed_now):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, text=SAMPLE_HTML)

        source = PastContestsSource(url="", transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_yields_empty_list(self, fixed_now):
        def handler(request):
            return httpx.Response(500)

        source = PastContestsSource(url=PAGE_URL, transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []

    @pytest.mark.asyncio
    async def test_over_length_title_is_skipped(self, fixed_now):
        page = f"""
        <div class="contest-card">
          <h3 class="title">{"Very Long Cup " * 40}</h3>
          <span class="end-time">2025-06-10T16:35:00Z</span>
          <a href="https://codeforces.com/contest/1">View</a>
        </div>
        <div class="contest-card">
          <h3 class="title">Codeforces Round 990 (Div. 1)</h3>
          <span class="end-time">2025-06-10T16:35:00Z</span>
          <a href="https://codeforces.com/contest/2046">View</a>
        </div>
        """

        def handler(request):
            return httpx.Response(200, text=page, headers={"Content-Type": "text/html"})

        source = PastContestsSource(url=PAGE_URL, transport=httpx.MockTransport(handler))
        records = await source.fetch(fixed_now)

        assert [r.name for r in records] == ["Codeforces Round 990 (Div. 1)"]
