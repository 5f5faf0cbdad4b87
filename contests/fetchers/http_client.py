"""
Async HTTP client shared by the contest sources.

Thin wrapper around httpx.AsyncClient that every source uses for its
outbound calls. It owns the request timeout, retries transient failures
(connect/read errors, timeouts, 5xx) with exponential backoff, and turns
every failure into SourceUnavailable so sources only handle one error type.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from django.conf import settings

from contests.exceptions import SourceUnavailable
from contests.monitoring import add_source_breadcrumb

logger = logging.getLogger(__name__)


class ContestHttpClient:
    """
    Async HTTP client for contest platform APIs and pages.

    Usage:
        async with ContestHttpClient("codeforces") as client:
            payload = await client.get_json("https://codeforces.com/api/contest.list")

    Features:
    - Connection pooling for the lifetime of one source fetch
    - Configurable timeout and retry count (defaults from settings)
    - Injectable httpx transport, so tests can use httpx.MockTransport
    """

    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )

    # No 'br': httpx only decompresses brotli when the brotli package is installed
    DEFAULT_HEADERS = {
        "Accept": "application/json, text/html;q=0.9, */*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
    }

    def __init__(
        self,
        source_name: str,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            source_name: Source using this client, for logs and errors
            timeout: Per-request timeout in seconds (default from settings)
            max_retries: Retries after the first attempt (default from settings)
            retry_delay: Base backoff delay in seconds (default from settings)
            user_agent: Custom User-Agent string
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.source_name = source_name
        self.timeout = timeout if timeout is not None else getattr(
            settings, "CONTESTS_REQUEST_TIMEOUT", 15
        )
        self.max_retries = max_retries if max_retries is not None else getattr(
            settings, "CONTESTS_HTTP_MAX_RETRIES", 2
        )
        self.retry_delay = retry_delay if retry_delay is not None else getattr(
            settings, "CONTESTS_HTTP_RETRY_DELAY", 1.0
        )
        self.user_agent = user_agent or self.DEFAULT_USER_AGENT
        self.transport = transport

        self._http_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._init_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _init_http_client(self):
        """Initialize HTTP client."""
        if self._http_client is None:
            headers = {
                **self.DEFAULT_HEADERS,
                "User-Agent": self.user_agent,
            }
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                follow_redirects=True,
                transport=self.transport,
            )

    async def close(self):
        """Close HTTP client connection."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body."""
        response = await self._request("GET", url, params=params, headers=headers)
        return self._decode_json(response)

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """POST a JSON payload to ``url`` and decode the JSON body."""
        response = await self._request("POST", url, json=payload, headers=headers)
        return self._decode_json(response)

    async def get_text(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """GET ``url`` and return the body as text (HTML pages)."""
        response = await self._request("GET", url, headers=headers)
        return response.text

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise SourceUnavailable(
                self.source_name, f"invalid JSON from {response.request.url}: {e}"
            ) from e

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send a request with exponential backoff on transient failures.

        4xx responses are not retried. Anything that is still failing after
        the last attempt is raised as SourceUnavailable.
        """
        if self._http_client is None:
            await self._init_http_client()

        add_source_breadcrumb(self.source_name, url, message=f"{method} request")

        attempts = self.max_retries + 1
        last_error: Optional[str] = None

        for attempt in range(attempts):
            try:
                response = await self._http_client.request(method, url, **kwargs)
            except httpx.TimeoutException as e:
                last_error = f"timeout: {e}"
                logger.warning(
                    f"{self.source_name}: timeout on {url} (attempt {attempt + 1}/{attempts})"
                )
            except httpx.TransportError as e:
                last_error = f"transport error: {e}"
                logger.warning(
                    f"{self.source_name}: {e} on {url} (attempt {attempt + 1}/{attempts})"
                )
            else:
                if 200 <= response.status_code < 300:
                    return response
                if 400 <= response.status_code < 500:
                    raise SourceUnavailable(
                        self.source_name, f"HTTP {response.status_code} from {url}"
                    )
                last_error = f"HTTP {response.status_code}"
                logger.warning(
                    f"{self.source_name}: HTTP {response.status_code} for {url} "
                    f"(attempt {attempt + 1}/{attempts})"
                )

            if attempt < attempts - 1 and self.retry_delay:
                await asyncio.sleep(self.retry_delay * (2 ** attempt))

        raise SourceUnavailable(
            self.source_name, f"{last_error} after {attempts} attempt(s) for {url}"
        )
