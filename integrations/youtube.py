"""YouTube Data API channel source: plain channel records for niche classification."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core import ChannelProfile


logger = logging.getLogger(__name__)

YOUTUBE_API = "https://www.googleapis.com/youtube/v3"


@dataclass
class ChannelSnapshot:
    profile: ChannelProfile
    analytics: str = ""
    from_api: bool = False


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def build_channel_analytics(profile: ChannelProfile, topic: str = "") -> str:
    """Human-readable channel summary embedded in the generation prompt."""
    avg_views = f"{round(profile.view_count / profile.video_count):,}" if profile.video_count else "N/A"
    lines = [
        f'Actual Channel Data for "{profile.name}":',
        f"- Description: {profile.description or 'No description'}",
        f"- Subscribers: {profile.subscriber_count:,}",
        f"- Total Views: {profile.view_count:,}",
        f"- Video Count: {profile.video_count}",
    ]
    if profile.published_at:
        lines.append(f"- Channel Created: {profile.published_at[:10]}")
    lines.append(f"- Average Views per Video: {avg_views}")
    titles = profile.video_titles()
    if titles:
        lines.append(f"- Recent Video Topics: {', '.join(titles[:3])}")
    focus = profile.description[:200] if profile.description else f"content related to {topic or profile.name}"
    lines.append("")
    lines.append(f"This channel appears to focus on: {focus}")
    return "\n".join(lines)


class YouTubeChannelSource:
    """
    Fetch channel metadata and recent upload titles.

    Without an API key, or when the API fails, a minimal profile is built from
    the request so classification can still run.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        recent_videos: int = 5,
        timeout: float = 12.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.recent_videos = max(1, int(recent_videos))
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch(
        self,
        channel_name: str,
        channel_id: Optional[str] = None,
        bio: Optional[str] = None,
        *,
        topic: str = "",
    ) -> ChannelSnapshot:
        minimal = ChannelProfile(name=channel_name, description=bio or "")
        if not self.is_configured():
            return ChannelSnapshot(profile=minimal)

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                profile = await self._fetch_profile(client, channel_name, channel_id, bio)
        except Exception as exc:
            logger.error(f"Error fetching YouTube channel data for '{channel_name}': {exc}")
            return ChannelSnapshot(profile=minimal)

        if profile is None:
            logger.info(f"No YouTube channel found for '{channel_name}', using request data")
            return ChannelSnapshot(profile=minimal)
        return ChannelSnapshot(profile=profile, analytics=build_channel_analytics(profile, topic), from_api=True)

    async def _fetch_profile(
        self,
        client: httpx.AsyncClient,
        channel_name: str,
        channel_id: Optional[str],
        bio: Optional[str],
    ) -> Optional[ChannelProfile]:
        if not channel_id:
            found = await self._get_json(
                client,
                "search",
                {"part": "snippet", "q": channel_name, "type": "channel", "maxResults": 1},
            )
            items = found.get("items") or []
            channel_id = ((items[0] or {}).get("snippet") or {}).get("channelId") if items else None
            if not channel_id:
                return None

        data = await self._get_json(
            client,
            "channels",
            {"part": "snippet,statistics,contentDetails", "id": channel_id},
        )
        items = data.get("items") or []
        if not items:
            return None
        channel = items[0]
        snippet = channel.get("snippet") or {}
        stats = channel.get("statistics") or {}
        uploads = ((channel.get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")

        recent: List[str] = []
        if uploads:
            videos = await self._get_json(
                client,
                "playlistItems",
                {"part": "snippet", "playlistId": uploads, "maxResults": self.recent_videos},
            )
            recent = [
                str((item.get("snippet") or {}).get("title") or "").strip()
                for item in videos.get("items") or []
                if str((item.get("snippet") or {}).get("title") or "").strip()
            ]

        return ChannelProfile(
            name=str(snippet.get("title") or channel_name),
            description=str(snippet.get("description") or bio or ""),
            recent_videos=recent,
            subscriber_count=_int(stats.get("subscriberCount")),
            view_count=_int(stats.get("viewCount")),
            video_count=_int(stats.get("videoCount")),
            published_at=snippet.get("publishedAt"),
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get_json(self, client: httpx.AsyncClient, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await client.get(f"{YOUTUBE_API}/{path}", params={**params, "key": self.api_key})
        response.raise_for_status()
        data = response.json()
        return data if isinstance(data, dict) else {}
