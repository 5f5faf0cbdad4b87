"""
Tests for ContestHttpClient retry and error mapping.
"""

import httpx
import pytest

from contests.exceptions import SourceUnavailable
from contests.fetchers.http_client import ContestHttpClient

URL = "https://codeforces.com/api/contest.list"


def _client(handler, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return ContestHttpClient("codeforces", transport=httpx.MockTransport(handler), **kwargs)


class TestContestHttpClient:

    @pytest.mark.asyncio
    async def test_get_json(self):
        async with _client(lambda request: httpx.Response(200, json={"status": "OK"})) as client:
            assert await client.get_json(URL) == {"status": "OK"}

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        async with _client(handler, max_retries=3) as client:
            with pytest.raises(SourceUnavailable, match="HTTP 404"):
                await client.get_json(URL)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_until_exhausted(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        async with _client(handler, max_retries=2) as client:
            with pytest.raises(SourceUnavailable) as exc_info:
                await client.get_text(URL)

        assert len(calls) == 3
        assert exc_info.value.source == "codeforces"
        assert "after 3 attempt(s)" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_timeout_then_success(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("slow", request=request)
            return httpx.Response(200, text="ok")

        async with _client(handler, max_retries=1) as client:
            assert await client.get_text(URL) == "ok"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_source_unavailable(self):
        async with _client(lambda request: httpx.Response(200, text="<html/>")) as client:
            with pytest.raises(SourceUnavailable, match="invalid JSON"):
                await client.get_json(URL)

    @pytest.mark.asyncio
    async def test_post_json_sends_payload_and_headers(self):
        seen = {}

        def handler(request):
            seen["body"] = request.content
            seen["origin"] = request.headers.get("Origin")
            return httpx.Response(200, json={"data": {}})

        async with _client(handler) as client:
            await client.post_json(URL, {"query": "{ x }"}, headers={"Origin": "https://leetcode.com"})

        assert b'"query"' in seen["body"]
        assert seen["origin"] == "https://leetcode.com"

    def test_defaults_come_from_settings(self, settings):
        settings.CONTESTS_REQUEST_TIMEOUT = 7
        settings.CONTESTS_HTTP_MAX_RETRIES = 4

        client = ContestHttpClient("leetcode")

        assert client.timeout == 7
        assert client.max_retries == 4
