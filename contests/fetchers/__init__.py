"""
Outbound HTTP for the contest sources.

- ContestHttpClient: async httpx client with timeout, retries and a single
  SourceUnavailable failure type
"""

from .http_client import ContestHttpClient

__all__ = [
    "ContestHttpClient",
]
