"""
Solution video client for the YouTube Data API v3.

Reads one playlist per platform (settings.YOUTUBE_PLAYLISTS) and turns each
playlist item into a SolutionVideo. Video titles are free text; linking a
video to a contest happens later in SolutionMatcher.

Failures are contained per playlist: a playlist that errors contributes no
videos and the rest are still read.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from contests.monitoring import add_source_breadcrumb, capture_source_failure
from contests.utils.normalization import clean_text, parse_datetime_value

logger = logging.getLogger(__name__)

YOUTUBE_PLAYLIST_ITEMS_URL = "https://www.googleapis.com/youtube/v3/playlistItems"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


@dataclass
class SolutionVideo:
    """A solution video from a platform's playlist."""

    platform: str
    contest_name: str
    video_url: str
    published_at: Optional[datetime] = None


def parse_playlist_item(item: Dict[str, Any], platform: str) -> Optional[SolutionVideo]:
    """
    Map one playlistItems entry to a SolutionVideo.

    Returns None for items without a title or video ID (deleted or private
    videos show up like that).
    """
    snippet = item.get("snippet") or {}
    title = clean_text(snippet.get("title"))
    video_id = (snippet.get("resourceId") or {}).get("videoId")

    if not title or not video_id:
        return None

    return SolutionVideo(
        platform=platform,
        contest_name=title,
        video_url=YOUTUBE_WATCH_URL.format(video_id=video_id),
        published_at=parse_datetime_value(snippet.get("publishedAt")),
    )


class YouTubeClient:
    """Client for YouTube playlist items."""

    MAX_RESULTS = 50

    def __init__(
        self,
        api_key: Optional[str] = None,
        playlists: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: YouTube Data API key (default settings.YOUTUBE_API_KEY)
            playlists: Platform -> playlist ID (default settings.YOUTUBE_PLAYLISTS)
            timeout: Request timeout in seconds (default CONTESTS_REQUEST_TIMEOUT)
            session: Optional requests session, left open for the caller.
                Without one, each fetch_videos() call opens and closes its own.
        """
        self.api_key = api_key if api_key is not None else getattr(settings, "YOUTUBE_API_KEY", "")
        self.playlists = playlists if playlists is not None else getattr(
            settings, "YOUTUBE_PLAYLISTS", {}
        )
        self.timeout = timeout or getattr(settings, "CONTESTS_REQUEST_TIMEOUT", 15)
        self.session = session

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.playlists)

    def fetch_videos(self) -> List[SolutionVideo]:
        """
        Fetch solution videos from every configured playlist.

        Returns:
            Videos in playlist order, platforms in configuration order.
            Empty when no API key or no playlists are configured.
        """
        if not self.enabled:
            logger.debug("YouTube API key or playlists not configured, skipping videos")
            return []

        if self.session is not None:
            videos = self._fetch_all(self.session)
        else:
            with requests.Session() as session:
                videos = self._fetch_all(session)

        logger.info(f"Fetched {len(videos)} solution videos from {len(self.playlists)} playlists")
        return videos

    def _fetch_all(self, session: requests.Session) -> List[SolutionVideo]:
        videos = []
        for platform, playlist_id in self.playlists.items():
            videos.extend(self.fetch_playlist(platform, playlist_id, session=session))
        return videos

    def fetch_playlist(
        self,
        platform: str,
        playlist_id: str,
        session: Optional[requests.Session] = None,
    ) -> List[SolutionVideo]:
        """
        Fetch one playlist page of videos.

        Args:
            platform: Platform the playlist belongs to
            playlist_id: YouTube playlist ID
            session: Session to send the request on (default self.session,
                then a one-off requests.get)

        Returns:
            Videos from the playlist, empty on any failure
        """
        params = {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": self.MAX_RESULTS,
            "key": self.api_key,
        }

        add_source_breadcrumb(
            "youtube",
            YOUTUBE_PLAYLIST_ITEMS_URL,
            message="Playlist fetch",
            extra_data={"platform": platform, "playlist_id": playlist_id},
        )

        try:
            http = session or self.session or requests
            response = http.get(
                YOUTUBE_PLAYLIST_ITEMS_URL,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"YouTube playlist {playlist_id} ({platform}) failed: {e}")
            capture_source_failure(
                "youtube",
                e,
                url=YOUTUBE_PLAYLIST_ITEMS_URL,
                extra_data={"platform": platform, "playlist_id": playlist_id},
            )
            return []

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            logger.warning(f"YouTube playlist {playlist_id} ({platform}) returned no items list")
            return []

        videos = []
        for item in items:
            if not isinstance(item, dict):
                continue
            video = parse_playlist_item(item, platform)
            if video:
                videos.append(video)

        logger.debug(f"YouTube playlist {playlist_id} ({platform}): {len(videos)} videos")
        return videos
