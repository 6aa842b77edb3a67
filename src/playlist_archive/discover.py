"""Incremental discovery of playlists missing from the archive index."""
from __future__ import annotations

from datetime import date
import logging
from typing import Callable, Sequence

from playlist_archive.archive import ArchiveEntry, extract_entries
from playlist_archive.dates import first_of_month, next_month
from playlist_archive.index import ArchiveIndex, anchor_date, known_urls

logger = logging.getLogger(__name__)

# Upper bound on months scanned per run, so a misbehaving archive host that
# answers every month with content cannot keep the crawl going forever.
MAX_MONTHS = 10

FetchMonth = Callable[[int, int], str]
Extract = Callable[[str, date], Sequence[ArchiveEntry]]


def discover_missing(
    index: ArchiveIndex,
    fetch_month: FetchMonth,
    extract: Extract = extract_entries,
    max_months: int = MAX_MONTHS,
) -> list[ArchiveEntry]:
    """Scan month listings from the index's latest entry onward.

    Returns entries whose url is not yet in ``index``, in month then page
    order. The index itself is never modified. Raises ArchiveIndexError when
    the index is empty or its latest date is unparseable; errors raised by
    ``fetch_month`` propagate unchanged.
    """
    if max_months < 1:
        raise ValueError("max_months must be at least 1")

    current = first_of_month(anchor_date(index))
    seen = known_urls(index)
    result: list[ArchiveEntry] = []

    for _ in range(max_months):
        page = fetch_month(current.year, current.month)
        entries = extract(page, current)

        if not entries:
            logger.info("No entries for %04d-%02d, stopping", current.year, current.month)
            break

        missing = []
        for entry in entries:
            if entry.url in seen:
                continue
            seen.add(entry.url)
            missing.append(entry)
        result.extend(missing)

        logger.info(
            "%04d-%02d: %d entries, %d new", current.year, current.month, len(entries), len(missing)
        )
        current = next_month(current)
    else:
        logger.warning("Stopped after %d months without reaching an empty month", max_months)

    return result
