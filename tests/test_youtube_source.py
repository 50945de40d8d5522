from __future__ import annotations

import httpx
import pytest

from core import ChannelProfile
from integrations import YouTubeChannelSource, build_channel_analytics


def _youtube_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path.rsplit("/", 1)[-1]
    assert request.url.params.get("key") == "yt-key"
    if path == "search":
        return httpx.Response(200, json={"items": [{"snippet": {"channelId": "UC123"}}]})
    if path == "channels":
        assert request.url.params.get("id") == "UC123"
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "snippet": {
                            "title": "CodeLab",
                            "description": "Python tutorials for beginners",
                            "publishedAt": "2019-04-02T10:00:00Z",
                        },
                        "statistics": {"subscriberCount": "12000", "viewCount": "480000", "videoCount": "48"},
                        "contentDetails": {"relatedPlaylists": {"uploads": "UU123"}},
                    }
                ]
            },
        )
    if path == "playlistItems":
        return httpx.Response(
            200,
            json={"items": [{"snippet": {"title": "Learn Python in 10 Minutes"}}, {"snippet": {"title": "Async Explained"}}]},
        )
    return httpx.Response(404)


@pytest.mark.asyncio
async def test_fetch_by_name_builds_profile_and_analytics():
    source = YouTubeChannelSource("yt-key", transport=httpx.MockTransport(_youtube_handler))

    snapshot = await source.fetch("CodeLab", topic="Python")

    assert snapshot.from_api is True
    assert snapshot.profile.subscriber_count == 12000
    assert snapshot.profile.video_titles() == ["Learn Python in 10 Minutes", "Async Explained"]
    assert "- Subscribers: 12,000" in snapshot.analytics
    assert "- Average Views per Video: 10,000" in snapshot.analytics
    assert "- Channel Created: 2019-04-02" in snapshot.analytics
    assert "Recent Video Topics: Learn Python in 10 Minutes, Async Explained" in snapshot.analytics


@pytest.mark.asyncio
async def test_without_api_key_returns_minimal_profile_from_request():
    calls = []
    source = YouTubeChannelSource(None, transport=httpx.MockTransport(lambda r: calls.append(r) or httpx.Response(500)))

    snapshot = await source.fetch("CodeLab", bio="I teach Python")

    assert snapshot.profile == ChannelProfile(name="CodeLab", description="I teach Python")
    assert snapshot.analytics == ""
    assert calls == []


@pytest.mark.asyncio
async def test_api_error_falls_back_to_minimal_profile():
    source = YouTubeChannelSource("yt-key", transport=httpx.MockTransport(lambda r: httpx.Response(403)))

    snapshot = await source.fetch("CodeLab", channel_id="UC123", bio="bio")

    assert snapshot.from_api is False
    assert snapshot.profile.name == "CodeLab"
    assert snapshot.profile.description == "bio"


@pytest.mark.asyncio
async def test_channel_not_found_falls_back():
    source = YouTubeChannelSource(
        "yt-key",
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"items": []})),
    )
    snapshot = await source.fetch("Nobody")
    assert snapshot.from_api is False


def test_analytics_without_videos_uses_topic_focus():
    text = build_channel_analytics(ChannelProfile(name="Quiet"), topic="Gardening")
    assert "- Average Views per Video: N/A" in text
    assert text.endswith("This channel appears to focus on: content related to Gardening")


@pytest.mark.asyncio
async def test_unexpected_item_shape_falls_back():
    source = YouTubeChannelSource(
        "yt-key",
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"items": ["not-a-channel"]})),
    )

    snapshot = await source.fetch("CodeLab", channel_id="UC123", bio="bio")

    assert snapshot.from_api is False
    assert snapshot.profile.description == "bio"
