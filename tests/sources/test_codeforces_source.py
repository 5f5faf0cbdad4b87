"""
Tests for CodeforcesSource.

Covers normalize_codeforces_contest() in isolation and the source's fetch()
against httpx.MockTransport: phase mapping, retention, and fail-soft
behavior on bad status, HTTP errors and network failures.
"""

from datetime import timedelta

import httpx
import pytest

from contests.models import ContestStatus, Platform
from contests.sources.codeforces_source import (
    CODEFORCES_API_URL,
    CodeforcesSource,
    normalize_codeforces_contest,
)


def _row(fixed_now, contest_id, name, phase, start_offset, duration=7200):
    return {
        "id": contest_id,
        "name": name,
        "phase": phase,
        "startTimeSeconds": int((fixed_now + start_offset).timestamp()),
        "durationSeconds": duration,
    }


class TestNormalizeCodeforcesContest:
    """Mapping of single contest rows."""

    def test_upcoming_contest(self, fixed_now):
        row = _row(fixed_now, 2063, "Codeforces Round 1000 (Div. 2)", "BEFORE", timedelta(days=2))

        record = normalize_codeforces_contest(row, fixed_now)

        assert record.name == "Codeforces Round 1000 (Div. 2)"
        assert record.platform == Platform.CODEFORCES
        assert record.date == fixed_now + timedelta(days=2)
        assert record.end_time == fixed_now + timedelta(days=2, hours=2)
        assert record.link == "https://codeforces.com/contest/2063"
        assert record.status == ContestStatus.UPCOMING

    def test_finished_phase_maps_to_finished(self, fixed_now):
        row = _row(fixed_now, 2000, "Educational Round 170", "FINISHED", -timedelta(days=3))

        record = normalize_codeforces_contest(row, fixed_now)

        assert record.status == ContestStatus.FINISHED

    def test_running_phase_maps_to_ongoing(self, fixed_now):
        row = _row(fixed_now, 2001, "Global Round 28", "SYSTEM_TEST", -timedelta(hours=3))

        record = normalize_codeforces_contest(row, fixed_now)

        assert record.status == ContestStatus.ONGOING

    def test_contest_older_than_retention_is_dropped(self, fixed_now):
        row = _row(fixed_now, 1500, "Round 700", "FINISHED", -timedelta(days=45))

        assert normalize_codeforces_contest(row, fixed_now) is None

    def test_contest_ended_29_days_ago_is_kept(self, fixed_now):
        # Ends exactly 29 days ago
        row = _row(fixed_now, 1600, "Round 800", "FINISHED", -timedelta(days=29, hours=2))

        assert normalize_codeforces_contest(row, fixed_now) is not None

    def test_long_running_contest_kept_regardless_of_start(self, fixed_now):
        row = _row(fixed_now, 1700, "Marathon", "CODING", -timedelta(days=40), duration=None)

        record = normalize_codeforces_contest(row, fixed_now)

        assert record is not None
        assert record.end_time is None
        assert record.status == ContestStatus.ONGOING

    def test_row_without_start_time_is_skipped(self, fixed_now):
        row = {"id": 1, "name": "No start", "phase": "BEFORE"}

        assert normalize_codeforces_contest(row, fixed_now) is None

    def test_row_without_name_is_skipped(self, fixed_now):
        row = _row(fixed_now, 1, "", "BEFORE", timedelta(days=1))

        assert normalize_codeforces_contest(row, fixed_now) is None


class TestCodeforcesSourceFetch:
    """fetch() against a mocked API."""

    @pytest.mark.asyncio
    async def test_fetch_returns_normalized_contests(self, fixed_now):
        payload = {
            "status": "OK",
            "result": [
                _row(fixed_now, 2063, "Round A", "BEFORE", timedelta(days=1)),
                _row(fixed_now, 2062, "Round B", "FINISHED", -timedelta(days=2)),
                _row(fixed_now, 1000, "Ancient Round", "FINISHED", -timedelta(days=400)),
                "not a row",
            ],
        }
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, json=payload)

        source = CodeforcesSource(transport=httpx.MockTransport(handler))
        records = await source.fetch(fixed_now)

        assert requested == [CODEFORCES_API_URL]
        assert [r.name for r in records] == ["Round A", "Round B"]

    @pytest.mark.asyncio
    async def test_non_ok_status_yields_empty_list(self, fixed_now):
        def handler(request):
            return httpx.Response(200, json={"status": "FAILED", "comment": "Call limit exceeded"})

        source = CodeforcesSource(transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []

    @pytest.mark.asyncio
    async def test_server_error_yields_empty_list(self, fixed_now):
        def handler(request):
            return httpx.Response(503, text="Service Unavailable")

        source = CodeforcesSource(transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []

    @pytest.mark.asyncio
    async def test_network_failure_yields_empty_list(self, fixed_now):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = CodeforcesSource(transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []

    @pytest.mark.asyncio
    async def test_invalid_json_yields_empty_list(self, fixed_now):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        source = CodeforcesSource(transport=httpx.MockTransport(handler))

        assert await source.fetch(fixed_now) == []

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self, fixed_now):
        calls = {"n": 0}

        def handler(request):
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(502)
            return httpx.Response(200, json={
                "status": "OK",
                "result": [_row(fixed_now, 1, "Round", "BEFORE", timedelta(days=1))],
            })

        source = CodeforcesSource(max_retries=1, transport=httpx.MockTransport(handler))
        records = await source.fetch(fixed_now)

        assert calls["n"] == 2
        assert len(records) == 1
