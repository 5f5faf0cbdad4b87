"""
Solution video matching.

A video matches a contest when, after lowercasing, either the contest name
contains the video title or the title contains the name. The first matching
video in iteration order wins; there is no ranking. False positives are
accepted in exchange for coverage.

Matches are attached in memory only. The stored contest is not modified.
"""

import logging
from typing import Iterable, List, Sequence

from contests.models import Contest

from .video_client import SolutionVideo

logger = logging.getLogger(__name__)


def names_match(contest_name: str, video_title: str) -> bool:
    """
    Case-insensitive containment in either direction.

    Empty strings never match, otherwise every title would contain them.
    """
    a = (contest_name or "").strip().lower()
    b = (video_title or "").strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


class SolutionMatcher:
    """Attach solution video links to past contests."""

    def match(
        self, past_contests: Sequence[Contest], videos: Iterable[SolutionVideo]
    ) -> List[Contest]:
        """
        Populate solution_link on contests that have a matching video.

        Contests that already have a solution_link (set by an admin) keep it.

        Args:
            past_contests: Contests to enrich
            videos: Candidate videos, in priority order

        Returns:
            The same contests, in the same order
        """
        videos = list(videos)
        matched = 0

        for contest in past_contests:
            if contest.solution_link:
                continue

            for video in videos:
                if names_match(contest.name, video.contest_name):
                    contest.solution_link = video.video_url
                    matched += 1
                    break

        if videos:
            logger.debug(f"Matched solution videos for {matched}/{len(past_contests)} past contests")
        return list(past_contests)
