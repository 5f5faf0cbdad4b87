"""
Contest sources.

Each source fetches one platform's contest list and normalizes it into
ContestRecord objects. Sources never raise from fetch().

Sources:
- CodeforcesSource: codeforces.com contest.list API
- CodeChefSource: codechef.com contest list API
- LeetCodeSource: leetcode.com GraphQL with REST fallbacks
- PastContestsSource: scraped contest-aggregator page
"""

from .base_source import (
    BaseSource,
    ContestRecord,
    get_configured_sources,
    get_source,
)
from .codeforces_source import CodeforcesSource
from .codechef_source import CodeChefSource
from .leetcode_source import LeetCodeSource
from .past_contests_source import PastContestsSource

__all__ = [
    "BaseSource",
    "ContestRecord",
    "CodeforcesSource",
    "CodeChefSource",
    "LeetCodeSource",
    "PastContestsSource",
    "get_configured_sources",
    "get_source",
]
