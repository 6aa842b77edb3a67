from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from playlist_archive.archive import ArchiveEntry

logger = logging.getLogger(__name__)

_ARTIST_TITLE_RE = re.compile(r"^\s*(?P<artist>.+?)(?:\s+[-–—]\s+|:\s+)(?P<title>.+?)\s*$")


class MusicVideo(BaseModel):
    source: str = Field(..., description="Lookup provider that found the video")
    host: str = Field(..., description="Site hosting the video, e.g. youtube")
    url: str
    title: str


class Track(BaseModel):
    artist: str
    title: str
    label: Optional[str] = None
    videos: List[MusicVideo] = Field(default_factory=list)


class Playlist(BaseModel):
    """The record stored for one playlist occurrence."""
    url: str
    caption: str
    date: str
    timeslot: Optional[str] = None
    tracks: List[Track] = Field(default_factory=list)


@dataclass(frozen=True)
class PlaylistSelectors:
    """CSS selectors describing a playlist page."""

    track: str = "li"
    artist: str | None = None
    title: str | None = None
    label: str | None = None


def _text(node) -> str:
    return " ".join(node.get_text(" ", strip=True).split()) if node is not None else ""


def split_artist_title(text: str) -> tuple[str, str] | None:
    """Split 'Artist - Title' (or 'Artist: Title') into its parts."""
    match = _ARTIST_TITLE_RE.match(text)
    if not match:
        return None
    return match.group("artist"), match.group("title")


def extract_tracks(html: str | None, selectors: PlaylistSelectors = PlaylistSelectors()) -> list[Track]:
    """Extract tracks from a playlist page in running order."""
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "lxml")
    tracks: list[Track] = []

    for row in soup.select(selectors.track):
        artist = _text(row.select_one(selectors.artist)) if selectors.artist else ""
        title = _text(row.select_one(selectors.title)) if selectors.title else ""
        label = _text(row.select_one(selectors.label)) if selectors.label else ""

        if not artist or not title:
            parts = split_artist_title(_text(row))
            if parts is None:
                logger.debug("Skipping unparseable track row %r", _text(row))
                continue
            artist, title = parts

        tracks.append(Track(artist=artist, title=title, label=label or None))

    return tracks


def build_playlist(entry: ArchiveEntry, tracks: list[Track]) -> Playlist:
    return Playlist(
        url=entry.url,
        caption=entry.caption,
        date=entry.date.isoformat(),
        timeslot=entry.timeslot,
        tracks=tracks,
    )


def playlist_record(playlist: Playlist) -> bytes:
    return playlist.model_dump_json(indent=2).encode("utf-8")
