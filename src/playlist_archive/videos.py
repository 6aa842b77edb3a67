"""Music video lookup for playlist tracks (YouTube Data API search)."""
from __future__ import annotations

from dataclasses import dataclass
import logging

import requests
import requests_cache

from playlist_archive.fetch import FetchError, fetch_json
from playlist_archive.playlist import MusicVideo

logger = logging.getLogger(__name__)

SOURCE = "youtube-api"
HOST = "youtube"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class VideoConfig:
    """Configuration for video lookups."""

    api_key: str | None
    search_url: str
    max_results: int
    timeout_s: int
    cache_enabled: bool
    cache_backend: str
    cache_name: str
    cache_expire_after_s: int


def has_results(response: requests.Response) -> bool:
    """Cache filter: only keep successful searches that found something."""
    if not response.ok:
        return False
    try:
        payload = response.json()
    except ValueError:
        return False
    return bool(isinstance(payload, dict) and payload.get("items"))


def build_video_session(config: VideoConfig) -> requests.Session:
    """Session for search requests; empty results are never cached."""
    if not config.cache_enabled:
        return requests.Session()
    return requests_cache.CachedSession(
        config.cache_name,
        backend=config.cache_backend,
        expire_after=config.cache_expire_after_s,
        filter_fn=has_results,
        ignored_parameters=["key"],
    )


def video_query(artist: str, title: str) -> str:
    return f"{artist} - {title} music video"


def lookup_videos(session: requests.Session, artist: str, title: str, config: VideoConfig) -> list[MusicVideo]:
    """Return candidate videos for a track, best match first; may be empty."""
    if not config.api_key:
        return []

    params = {
        "part": "snippet",
        "type": "video",
        "q": video_query(artist, title),
        "maxResults": config.max_results,
        "key": config.api_key,
    }
    try:
        payload = fetch_json(session, config.search_url, params=params, timeout_s=config.timeout_s)
    except FetchError as exc:
        logger.warning("Video search failed for %s - %s: %s", artist, title, exc)
        return []

    videos: list[MusicVideo] = []
    for item in payload.get("items", []):
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            continue
        videos.append(
            MusicVideo(
                source=SOURCE,
                host=HOST,
                url=WATCH_URL.format(video_id=video_id),
                title=(item.get("snippet") or {}).get("title", ""),
            )
        )
    return videos
