"""
Services for the contest refresh pipeline.

- ContestAggregator: staleness check, fetch, persist, partition, enrich
- ContestRepository: Contest persistence with transient-error retries
- SolutionMatcher: attach solution videos to past contests
- YouTubeClient: solution videos from YouTube playlists
"""

from .aggregator import AggregatorConfig, ContestAggregator, ContestFeed, RefreshSummary
from .repository import ContestRepository
from .solution_matcher import SolutionMatcher, names_match
from .video_client import SolutionVideo, YouTubeClient

__all__ = [
    "AggregatorConfig",
    "ContestAggregator",
    "ContestFeed",
    "ContestRepository",
    "RefreshSummary",
    "SolutionMatcher",
    "SolutionVideo",
    "YouTubeClient",
    "names_match",
]
