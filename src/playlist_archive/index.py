"""Persisted archive index: the record of every playlist already stored."""
from __future__ import annotations

from datetime import date
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from playlist_archive.archive import ArchiveEntry
from playlist_archive.dates import first_of_month, resolve_date

logger = logging.getLogger(__name__)


class ArchiveIndexError(IndexError):
    """The archive index is missing, empty, or its latest date is unusable."""


class IndexEntry(BaseModel):
    url: str = Field(..., description="Playlist page url, unique across the index")
    date: str = Field(..., description="ISO date of the playlist, e.g. 2020-11-22, or its caption")
    caption: Optional[str] = None
    timeslot: Optional[str] = None
    path: Optional[str] = Field(default=None, description="Record file, relative to the data root")


class ArchiveIndex(BaseModel):
    """
    Append-only list of known playlists. The last entry is the most recent
    one and seeds the next discovery run.
    """
    entries: List[IndexEntry] = Field(default_factory=list)


def load_index(path: str | Path) -> ArchiveIndex:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ArchiveIndexError(f"Archive index not found at {path}") from exc

    try:
        index = ArchiveIndex.model_validate_json(raw)
    except ValidationError as exc:
        raise ArchiveIndexError(f"Archive index at {path} is malformed: {exc}") from exc

    if not index.entries:
        raise ArchiveIndexError(f"No entries found in archive index at {path}")
    return index


def save_index(index: ArchiveIndex, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(index.model_dump_json(indent=2), encoding="utf-8")


def known_urls(index: ArchiveIndex) -> set[str]:
    return {entry.url for entry in index.entries}


def stored_date(value: str | None) -> date | None:
    """Strict ISO date of an index entry; never filled in from today's date."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def anchor_date(index: ArchiveIndex) -> date:
    """Date of the latest index entry, the starting point of discovery.

    The entry's ISO ``date`` is used when present. Otherwise its caption (or a
    caption stored as ``date``) is resolved against the month of the nearest
    earlier ISO-dated entry; without one, the caption must name a year.
    """
    if not index.entries:
        raise ArchiveIndexError("Archive index has no entries")

    latest = index.entries[-1]
    anchored = stored_date(latest.date)
    if anchored is not None:
        return anchored

    reference = None
    for entry in reversed(index.entries[:-1]):
        earlier = stored_date(entry.date)
        if earlier is not None:
            reference = first_of_month(earlier)
            break

    for text in (latest.caption, latest.date):
        resolved = resolve_date(text, reference)
        if resolved is not None:
            return resolved

    raise ArchiveIndexError(f"Couldn't extract a date from {latest.date!r} ({latest.url})")


def to_index_entry(entry: ArchiveEntry, path: str | None = None) -> IndexEntry:
    return IndexEntry(
        url=entry.url,
        date=entry.date.isoformat(),
        caption=entry.caption,
        timeslot=entry.timeslot,
        path=path,
    )


def append_entries(
    index: ArchiveIndex,
    entries: Iterable[ArchiveEntry],
    paths: Iterable[str | None] | None = None,
) -> ArchiveIndex:
    """Return a new index with ``entries`` appended after the existing ones."""
    entries = list(entries)
    paths = list(paths) if paths is not None else [None] * len(entries)
    if len(paths) != len(entries):
        raise ValueError("paths must match entries one to one")

    known = known_urls(index)
    appended = list(index.entries)
    for entry, path in zip(entries, paths):
        if entry.url in known:
            logger.debug("Skipping %s, already indexed", entry.url)
            continue
        known.add(entry.url)
        appended.append(to_index_entry(entry, path))
    return ArchiveIndex(entries=appended)
