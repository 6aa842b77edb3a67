"""Monthly archive listing extraction."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from playlist_archive.dates import TIME_OF_DAY, WEEKDAYS, resolve_date

logger = logging.getLogger(__name__)

_TIMESLOT_RE = re.compile(
    r"\b(?:{})\b\s+(?P<slot>{})\b".format(
        "|".join(sorted(WEEKDAYS, key=len, reverse=True)), "|".join(TIME_OF_DAY)
    ),
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ArchiveEntry:
    """One playlist occurrence discovered in a monthly listing."""

    url: str
    caption: str
    date: date
    timeslot: str | None = None


@dataclass(frozen=True)
class ArchiveSelectors:
    """CSS selectors describing a monthly listing page."""

    item: str = "li"
    link: str = "a[href]"
    timeslot: str | None = None
    base_url: str = ""


DEFAULT_SELECTORS = ArchiveSelectors()


def slugify_timeslot(value: str | None) -> str | None:
    """Lowercase a timeslot label and keep it safe for use in filenames."""
    if not value:
        return None
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or None


def caption_timeslot(caption: str) -> str | None:
    """Return the time-of-day word that follows a weekday, e.g. 'night'."""
    match = _TIMESLOT_RE.search(caption)
    return match.group("slot").lower() if match else None


def extract_entries(
    html: str | None,
    reference: date,
    selectors: ArchiveSelectors = DEFAULT_SELECTORS,
) -> list[ArchiveEntry]:
    """Extract archive entries from a monthly listing, in page order.

    Items without a link or with a caption that does not resolve to a date are
    skipped; they never abort the page.
    """
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "lxml")
    entries: list[ArchiveEntry] = []

    for item in soup.select(selectors.item):
        link = item if item.name == "a" and item.get("href") else item.select_one(selectors.link)
        if link is None or not link.get("href"):
            continue

        url = urljoin(selectors.base_url, link["href"].strip())
        caption = " ".join(link.get_text(" ", strip=True).split())

        resolved = resolve_date(caption, reference)
        if resolved is None:
            logger.debug("Dropping %s: no date in caption %r", url, caption)
            continue

        timeslot = None
        if selectors.timeslot:
            slot_tag = item.select_one(selectors.timeslot)
            if slot_tag is not None:
                timeslot = slugify_timeslot(slot_tag.get_text(" ", strip=True))
        if timeslot is None:
            timeslot = caption_timeslot(caption)

        entries.append(ArchiveEntry(url=url, caption=caption, date=resolved, timeslot=timeslot))

    return entries
