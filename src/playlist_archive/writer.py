"""Date-partitioned record files: <root>/<YYYY>/<MM>/<DD>[_<timeslot>][_<N>].<ext>"""
from __future__ import annotations

from datetime import date
import logging
from pathlib import Path

from playlist_archive.archive import slugify_timeslot

logger = logging.getLogger(__name__)

FIRST_SUFFIX = 2


def record_path(
    root: str | Path,
    day: date,
    timeslot: str | None = None,
    suffix: int | None = None,
    ext: str = "json",
) -> Path:
    stem = f"{day.day:02d}"
    timeslot = slugify_timeslot(timeslot)
    if timeslot:
        stem += f"_{timeslot}"
    if suffix is not None:
        stem += f"_{suffix}"
    return Path(root) / f"{day.year:04d}" / f"{day.month:02d}" / f"{stem}.{ext}"


def _write_new(path: Path, record: bytes) -> bool:
    """Create ``path`` with ``record``; False if the file already exists."""
    try:
        with open(path, "xb") as handle:
            handle.write(record)
    except FileExistsError:
        return False
    return True


def write_record(
    root: str | Path,
    day: date,
    timeslot: str | None,
    record: bytes,
    ext: str = "json",
) -> Path:
    """Write ``record`` to a fresh file for ``day`` and return its path.

    Existing files are never overwritten: when the base path is taken, the
    smallest free numeric suffix starting at _2 is used instead. The month
    directory is created only when the base path is free.
    """
    path = record_path(root, day, timeslot, ext=ext)

    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        if _write_new(path, record):
            logger.debug("Wrote %s", path)
            return path

    suffix = FIRST_SUFFIX
    while True:
        candidate = record_path(root, day, timeslot, suffix=suffix, ext=ext)
        if not candidate.exists() and _write_new(candidate, record):
            logger.debug("Wrote %s (base path taken)", candidate)
            return candidate
        suffix += 1
