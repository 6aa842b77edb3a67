"""Date inference for loosely formatted archive captions."""
from __future__ import annotations

from datetime import date
import logging
import re

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "mon", "tue", "tues", "wed", "thu", "thur", "thurs", "fri", "sat", "sun",
)

TIME_OF_DAY = ("morning", "afternoon", "evening", "night")

_MONTH = "|".join(sorted(MONTHS, key=len, reverse=True))
_WEEKDAY = "|".join(sorted(WEEKDAYS, key=len, reverse=True))
_TIME_OF_DAY = "|".join(TIME_OF_DAY)
# A day is never the minutes of a clock time or the hour in front of one.
_DAY = r"(?<!:)(?P<day>\d{1,2})(?:st|nd|rd|th)?\b(?![:.]\d)"
_YEAR = r"(?:,?\s+(?P<year>\d{4})\b)?"

# Ordered by priority: an explicit month name beats the weekday-anchored form.
_PATTERNS = (
    re.compile(rf"\b{_DAY}\s+(?:of\s+)?(?P<month>{_MONTH})\b\.?{_YEAR}", re.IGNORECASE),
    re.compile(rf"\b(?P<month>{_MONTH})\b\.?\s+{_DAY}{_YEAR}", re.IGNORECASE),
    re.compile(rf"\b(?P<weekday>{_WEEKDAY})\b(?:\s+(?:{_TIME_OF_DAY}))?\s+{_DAY}", re.IGNORECASE),
)


def resolve_date(caption: str | None, reference: date | None) -> date | None:
    """Resolve the calendar date described by ``caption``.

    ``reference`` is usually the first day of the month being scraped. When the
    caption carries no year, the reference year is assumed and rolled forward
    by one if the month would otherwise fall before the reference month.
    Without a reference only captions naming day, month and year resolve.
    Returns None when no day-of-month can be found or the date does not exist.
    """
    if not caption:
        return None

    for pattern in _PATTERNS:
        match = pattern.search(caption)
        if match:
            break
    else:
        logger.debug("No date tokens in caption %r", caption)
        return None

    groups = match.groupdict()
    if reference is None and not (groups.get("month") and groups.get("year")):
        logger.debug("Caption %r needs a reference date", caption)
        return None

    day = int(groups["day"])
    month = MONTHS[groups["month"].lower()] if groups.get("month") else reference.month

    if groups.get("year"):
        year = int(groups["year"])
    elif month < reference.month:
        year = reference.year + 1
    else:
        year = reference.year

    try:
        return date(year, month, day)
    except ValueError as exc:
        logger.debug("Caption %r does not name a real date: %s", caption, exc)
        return None


def first_of_month(value: date) -> date:
    return date(value.year, value.month, 1)


def next_month(value: date) -> date:
    """Return the first day of the month after ``value``."""
    return first_of_month(value) + relativedelta(months=1)
