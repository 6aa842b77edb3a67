from datetime import date
import json
from pathlib import Path

from playlist_archive.archive import ArchiveEntry
from playlist_archive.playlist import (
    MusicVideo,
    PlaylistSelectors,
    Track,
    build_playlist,
    extract_tracks,
    playlist_record,
    split_artist_title,
)

FIXTURES = Path(__file__).parent / "fixtures"

SELECTORS = PlaylistSelectors(track="ol.playlist li", artist=".artist", title=".title", label=".label")


def test_extract_tracks_from_fixture():
    html = (FIXTURES / "playlist.html").read_text(encoding="utf-8")

    tracks = extract_tracks(html, SELECTORS)

    assert tracks == [
        Track(artist="Tame Impala", title="Lost in Yesterday", label="Modular"),
        Track(artist="The Avalanches", title="Running Red Lights"),
        Track(artist="Thelma Plum", title="Better in Blak"),
    ]


def test_extract_tracks_from_plain_rows():
    html = "<ul><li>Gang of Youths: the angel of 8th ave.</li><li>Advertisement</li></ul>"

    assert extract_tracks(html) == [Track(artist="Gang of Youths", title="the angel of 8th ave.")]
    assert extract_tracks("") == []


def test_split_artist_title():
    assert split_artist_title("Midnight Oil - Beds Are Burning") == ("Midnight Oil", "Beds Are Burning")
    assert split_artist_title("Jet-Are You Gonna Be My Girl") is None


def test_playlist_record_contains_entry_and_tracks():
    entry = ArchiveEntry(
        url="https://example.org/p/2020-01-04",
        caption="Saturday morning 4 January on ABC TV",
        date=date(2020, 1, 4),
        timeslot="morning",
    )
    track = Track(artist="Tame Impala", title="Lost in Yesterday")
    track.videos = [
        MusicVideo(source="youtube-api", host="youtube", url="https://www.youtube.com/watch?v=abc", title="Lost in Yesterday")
    ]

    record = json.loads(playlist_record(build_playlist(entry, [track])))

    assert record["url"] == entry.url
    assert record["date"] == "2020-01-04"
    assert record["timeslot"] == "morning"
    assert record["tracks"][0]["videos"][0]["host"] == "youtube"
