"""CLI entrypoint for archiving newly published playlists."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from tqdm import tqdm
import yaml

from playlist_archive.archive import ArchiveSelectors, extract_entries
from playlist_archive.discover import MAX_MONTHS, discover_missing
from playlist_archive.fetch import FetchConfig, build_session, fetch_page, make_month_fetcher
from playlist_archive.index import append_entries, load_index, save_index
from playlist_archive.playlist import PlaylistSelectors, build_playlist, extract_tracks, playlist_record
from playlist_archive.videos import VideoConfig, build_video_session, lookup_videos
from playlist_archive.writer import write_record

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> dict:
    """Load YAML configuration."""
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def build_fetch_config(config: dict) -> FetchConfig:
    """Build FetchConfig from YAML."""
    retries = config.get("retries", {})
    cache = config.get("cache", {})
    return FetchConfig(
        user_agent=config.get("user_agent", "playlist-archive/0.1"),
        timeout_s=int(config.get("request_timeout_s", 20)),
        sleep_s=float(config.get("sleep_s", 1.0)),
        retries_total=int(retries.get("total", 3)),
        retries_backoff=float(retries.get("backoff_factor", 0.5)),
        retries_statuses=list(retries.get("status_forcelist", [])),
        cache_enabled=bool(cache.get("enabled", True)),
        cache_backend=str(cache.get("backend", "sqlite")),
        cache_name=str(cache.get("name", "http_cache")),
        cache_expire_after_s=int(cache.get("expire_after_s", 86400)),
    )


def build_archive_selectors(config: dict) -> ArchiveSelectors:
    archive = config.get("archive", {})
    selectors = archive.get("selectors", {})
    return ArchiveSelectors(
        item=selectors.get("item", "li"),
        link=selectors.get("link", "a[href]"),
        timeslot=selectors.get("timeslot"),
        base_url=archive.get("base_url", ""),
    )


def build_playlist_selectors(config: dict) -> PlaylistSelectors:
    selectors = config.get("playlist", {}).get("selectors", {})
    return PlaylistSelectors(
        track=selectors.get("track", "li"),
        artist=selectors.get("artist"),
        title=selectors.get("title"),
        label=selectors.get("label"),
    )


def build_video_config(config: dict) -> VideoConfig:
    videos = config.get("videos", {})
    cache = videos.get("cache", {})
    return VideoConfig(
        api_key=os.getenv(videos.get("api_key_env", "YOUTUBE_API_KEY")) or videos.get("api_key"),
        search_url=videos.get("search_url", "https://www.googleapis.com/youtube/v3/search"),
        max_results=int(videos.get("max_results", 5)),
        timeout_s=int(config.get("request_timeout_s", 20)),
        cache_enabled=bool(cache.get("enabled", True)),
        cache_backend=str(cache.get("backend", "sqlite")),
        cache_name=str(cache.get("name", "video_cache")),
        cache_expire_after_s=int(cache.get("expire_after_s", 30 * 86400)),
    )


def collect_playlists(config_path: str, dry_run: bool = False) -> list[Path]:
    """Discover playlists missing from the index, store them, update the index."""
    config = load_config(config_path)
    fetch_config = build_fetch_config(config)
    archive_selectors = build_archive_selectors(config)
    playlist_selectors = build_playlist_selectors(config)
    video_config = build_video_config(config)

    data_dir = Path(config.get("data_dir", "data"))
    index_path = Path(config.get("index_path", data_dir / "index.json"))
    max_months = int(config.get("discovery", {}).get("max_months", MAX_MONTHS))

    index = load_index(index_path)
    session = build_session(fetch_config)
    fetch_month = make_month_fetcher(
        session,
        config["archive"]["url"],
        timeout_s=fetch_config.timeout_s,
        sleep_s=fetch_config.sleep_s,
    )

    missing = discover_missing(
        index,
        fetch_month,
        extract=lambda html, reference: extract_entries(html, reference, archive_selectors),
        max_months=max_months,
    )
    logger.info("Discovered %d new playlists", len(missing))

    if dry_run:
        for entry in missing:
            logger.info("%s %s %s", entry.date.isoformat(), entry.timeslot or "-", entry.url)
        return []

    video_session = build_video_session(video_config) if video_config.api_key else None
    if video_session is None:
        logger.info("No video API key configured, storing playlists without videos")

    # The index is saved after every record so a failed fetch part way
    # through does not lose track of files already written.
    paths: list[Path] = []
    for entry in tqdm(missing, desc="playlists"):
        html = fetch_page(session, entry.url, timeout_s=fetch_config.timeout_s)
        tracks = extract_tracks(html, playlist_selectors)
        if video_session is not None:
            for track in tracks:
                track.videos = lookup_videos(video_session, track.artist, track.title, video_config)

        playlist = build_playlist(entry, tracks)
        path = write_record(data_dir, entry.date, entry.timeslot, playlist_record(playlist))
        logger.info("Stored %s (%d tracks) at %s", entry.url, len(tracks), path)
        paths.append(path)

        index = append_entries(index, [entry], [path.relative_to(data_dir).as_posix()])
        save_index(index, index_path)

    logger.info("Index now holds %d playlists", len(index.entries))
    return paths


def main() -> None:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Archive newly published playlists")
    parser.add_argument("--config", required=True, help="Path to config.yaml")
    parser.add_argument("--dry-run", action="store_true", help="Only report newly discovered playlists")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    collect_playlists(args.config, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
